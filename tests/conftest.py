from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from hillpulse.container import Services
from hillpulse.core.config import Settings
from hillpulse.db.database import create_engine, create_session_factory
from hillpulse.db.summaries import SummaryRepository

SECRET = "test-secret"


class FakeSummarizer:
    def __init__(self, summary: str = "@SpeakerJohnson: House passes stopgap funding bill", error: Exception | None = None):
        self.summary = summary
        self.error = error
        self.calls = []

    def summarize(self, text, author=None, url=None):
        self.calls.append((text, author, url))
        if self.error is not None:
            raise self.error
        return self.summary


class RecordingNotifier:
    def __init__(self, result: bool = True):
        self.result = result
        self.calls = []

    @property
    def enabled(self):
        return True

    def publish(self, title, body, url):
        self.calls.append((title, body, url))
        return self.result


def sqlite_url(tmp_path) -> str:
    return f"sqlite+aiosqlite:///{tmp_path / 'hillpulse.db'}"


@pytest.fixture
def settings(tmp_path):
    return Settings(
        gemini_api_key="test-key",
        ingest_secret=SECRET,
        database_url=sqlite_url(tmp_path),
        summarize_retry_delay=0,
    )


@pytest.fixture
def summarizer():
    return FakeSummarizer()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def services(settings, summarizer, notifier):
    engine = create_engine(settings.database_url)
    return Services(
        settings=settings,
        summarizer=summarizer,
        repository=SummaryRepository(create_session_factory(engine)),
        notifier=notifier,
        engine=engine,
    )


@pytest.fixture
def client(services):
    from main import create_app

    with TestClient(create_app(services)) as test_client:
        yield test_client


@pytest.fixture
def auth_headers():
    return {"Authorization": f"Bearer {SECRET}"}
