from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.orm import sessionmaker

from hillpulse.core.config import FEED_LIMIT
from hillpulse.core.errors import NotConfiguredError, PersistenceError
from hillpulse.core.logging import log
from hillpulse.db.models import Summary

_INSERTS = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}


class SummaryRepository:
    """Idempotent writes and newest-first reads over the ``summaries`` table."""

    def __init__(self, session_factory: sessionmaker | None):
        self.session_factory = session_factory

    @property
    def configured(self) -> bool:
        return self.session_factory is not None

    async def insert(self, summary: str, author: str | None, url: str | None) -> bool:
        """True only when a new row was written."""
        if not self.configured:
            log.warning("⚠️ Skipping DB save: database is not configured")
            return False

        try:
            async with self.session_factory() as session:
                insert = _INSERTS.get(session.bind.dialect.name)
                if insert is None:
                    raise PersistenceError(f"Unsupported database dialect: {session.bind.dialect.name}")
                stmt = (
                    insert(Summary)
                    .values(summary_text=summary, tweet_author=author or None, tweet_url=url or None)
                    .on_conflict_do_nothing(index_elements=[Summary.tweet_url])
                )
                result = await session.execute(stmt)
                await session.commit()
        except Exception as e:
            log.error(f"❌ DB insert failed for url={url}: {e}")
            return False

        inserted = result.rowcount > 0
        if inserted:
            log.info(f"💾 Saved summary for url={url}")
        else:
            log.info(f"♻️ Summary for url={url} already stored, skipping")
        return inserted

    async def recent(self, limit: int = FEED_LIMIT) -> list[Summary]:
        if not self.configured:
            raise NotConfiguredError("Missing DATABASE_URL environment variable.")

        limit = max(0, min(limit, FEED_LIMIT))
        try:
            async with self.session_factory() as session:
                result = await session.execute(
                    select(Summary).order_by(Summary.created_at.desc(), Summary.id.desc()).limit(limit)
                )
                return list(result.scalars().all())
        except Exception as e:
            raise PersistenceError(str(e)) from e
