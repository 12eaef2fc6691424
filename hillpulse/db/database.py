import ssl

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker

from hillpulse.core.logging import log
from hillpulse.db.models import Base


def normalize_database_url(database_url: str) -> str:
    """Point plain Postgres URLs (as hosting providers hand them out) at asyncpg."""
    if database_url.startswith("postgres://"):
        database_url = "postgresql://" + database_url[len("postgres://"):]
    url = make_url(database_url)
    if url.drivername == "postgresql":
        url = url.set(drivername="postgresql+asyncpg")
    elif url.drivername == "sqlite":
        url = url.set(drivername="sqlite+aiosqlite")
    if url.drivername.startswith("postgresql"):
        # asyncpg takes an SSL context instead of libpq's sslmode
        url = url.difference_update_query(["sslmode"])
    return url.render_as_string(hide_password=False)


def _relaxed_ssl_context() -> ssl.SSLContext:
    context = ssl.create_default_context()
    context.check_hostname = False
    context.verify_mode = ssl.CERT_NONE
    return context


def create_engine(database_url: str, ssl_relaxed: bool = True) -> AsyncEngine | None:
    if not database_url:
        log.warning("⚠️ DATABASE_URL is not set. Summaries will not be persisted.")
        return None

    url = normalize_database_url(database_url)
    connect_args = {}
    if url.startswith("postgresql"):
        if ssl_relaxed:
            connect_args["ssl"] = _relaxed_ssl_context()
        else:
            # asyncpg understands the libpq sslmode names directly
            sslmode = make_url(database_url.replace("postgres://", "postgresql://", 1)).query.get("sslmode")
            if sslmode:
                connect_args["ssl"] = sslmode if isinstance(sslmode, str) else sslmode[-1]

    return create_async_engine(url, future=True, echo=False, pool_pre_ping=True, connect_args=connect_args)


def create_session_factory(engine: AsyncEngine) -> sessionmaker:
    return sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)


async def init_db(engine: AsyncEngine | None) -> bool:
    """Create the summaries table if it is missing. Safe to run on every start."""
    if engine is None:
        return False
    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
    except Exception as e:
        log.error(f"❌ Could not ensure database schema: {e}")
        return False
    log.info("🗄️ Database schema checked/created successfully")
    return True
