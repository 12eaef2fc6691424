from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncEngine

from hillpulse.core.config import Settings
from hillpulse.db.database import create_engine, create_session_factory
from hillpulse.db.summaries import SummaryRepository
from hillpulse.services.gemini import GeminiClient
from hillpulse.services.notify import PushNotifier, init_firebase


@dataclass
class Services:
    """Everything a request needs, built once at process start."""

    settings: Settings
    summarizer: GeminiClient
    repository: SummaryRepository
    notifier: PushNotifier
    engine: AsyncEngine | None = None

    async def close(self) -> None:
        if self.engine is not None:
            await self.engine.dispose()


def build_services(settings: Settings) -> Services:
    engine = create_engine(settings.database_url, ssl_relaxed=settings.database_ssl_relaxed)
    session_factory = create_session_factory(engine) if engine is not None else None

    return Services(
        settings=settings,
        summarizer=GeminiClient(
            api_key=settings.gemini_api_key,
            model=settings.gemini_model,
            max_retries=settings.summarize_max_retries,
            retry_delay=settings.summarize_retry_delay,
            timeout=settings.request_timeout,
        ),
        repository=SummaryRepository(session_factory),
        notifier=PushNotifier(init_firebase(settings.fcm_service_account), topic=settings.fcm_topic),
        engine=engine,
    )
