import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()

IN_DOCKER = os.getenv("IN_DOCKER", "false").lower() == "true"

if IN_DOCKER:
    LOG_PATH = "/logs/hillpulse.log"
else:
    LOG_PATH = "./hillpulse.log"
LOG_PATH = os.getenv("LOG_PATH", LOG_PATH)

GEMINI_API_BASE = "https://generativelanguage.googleapis.com/v1/models"
DEFAULT_GEMINI_MODEL = "gemini-2.5-flash-lite"
DEFAULT_TOPIC = "hillpulse_updates"
DEFAULT_TITLE = "The Capitol Wire"
FEED_LIMIT = 50


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    port: int = 10000
    gemini_api_key: str = ""
    gemini_model: str = DEFAULT_GEMINI_MODEL
    ingest_secret: str = ""
    database_url: str = ""
    # Hosted Postgres providers terminate TLS with certificates we can't verify.
    database_ssl_relaxed: bool = True
    fcm_service_account: str = ""
    fcm_topic: str = DEFAULT_TOPIC
    notification_title: str = DEFAULT_TITLE
    summarize_max_retries: int = 5
    summarize_retry_delay: float = 8.0
    request_timeout: int = 30

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            port=int(os.getenv("PORT", 10000)),
            gemini_api_key=os.getenv("GEMINI_API_KEY", ""),
            gemini_model=os.getenv("GEMINI_MODEL", DEFAULT_GEMINI_MODEL),
            ingest_secret=os.getenv("INGEST_SECRET", ""),
            database_url=os.getenv("DATABASE_URL", ""),
            database_ssl_relaxed=_env_bool("DATABASE_SSL_RELAXED", True),
            fcm_service_account=(
                os.getenv("FCM_SERVICE_ACCOUNT_B64")
                or os.getenv("FIREBASE_SERVICE_ACCOUNT")
                or ""
            ),
            fcm_topic=os.getenv("FCM_TOPIC", DEFAULT_TOPIC),
            notification_title=os.getenv("NOTIFICATION_TITLE", DEFAULT_TITLE),
            summarize_max_retries=int(os.getenv("SUMMARIZE_MAX_RETRIES", 5)),
            summarize_retry_delay=float(os.getenv("SUMMARIZE_RETRY_DELAY", 8.0)),
            request_timeout=int(os.getenv("REQUEST_TIMEOUT", 30)),
        )
