import base64
import binascii
import json

import firebase_admin
from firebase_admin import credentials, messaging

from hillpulse.core.config import DEFAULT_TITLE, DEFAULT_TOPIC
from hillpulse.core.logging import log

FIREBASE_APP_NAME = "hillpulse"


def parse_service_account(raw: str) -> dict:
    """Accept the service account either as raw JSON or base64-encoded JSON."""
    raw = raw.strip()
    if raw.startswith("{"):
        return json.loads(raw)
    try:
        decoded = base64.b64decode(raw, validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError) as e:
        raise ValueError(f"service account is neither JSON nor base64 JSON: {e}") from e
    return json.loads(decoded)


def init_firebase(service_account: str) -> firebase_admin.App | None:
    """Initialize the Firebase Admin SDK; None means push notifications are disabled."""
    if not service_account:
        log.warning("⚠️ Firebase service account is not set. Push notifications will be disabled.")
        return None

    try:
        return firebase_admin.get_app(FIREBASE_APP_NAME)
    except ValueError:
        pass

    try:
        cert = credentials.Certificate(parse_service_account(service_account))
        app = firebase_admin.initialize_app(cert, name=FIREBASE_APP_NAME)
    except Exception as e:
        log.error(f"❌ Could not initialize Firebase Admin SDK: {e}")
        return None

    log.info("🔥 Firebase Admin SDK initialized successfully")
    return app


class PushNotifier:
    """Fire-and-forget broadcast to every subscriber of one FCM topic."""

    def __init__(self, app: firebase_admin.App | None, topic: str = DEFAULT_TOPIC):
        self.app = app
        self.topic = topic

    @property
    def enabled(self) -> bool:
        return self.app is not None

    def build_message(self, title: str | None, body: str, url: str | None) -> messaging.Message:
        return messaging.Message(
            notification=messaging.Notification(title=title or DEFAULT_TITLE, body=body),
            # the mobile client opens this link when the notification is tapped
            data={"url": url or ""},
            topic=self.topic,
        )

    def publish(self, title: str | None, body: str, url: str | None) -> bool:
        if not self.enabled:
            log.warning("⚠️ Skipping FCM: Firebase Admin SDK not initialized")
            return False

        try:
            message_id = messaging.send(self.build_message(title, body, url), app=self.app)
        except Exception as e:
            log.error(f"❌ FCM send failed: {e}")
            return False

        log.info(f"📣 Sent FCM message to topic={self.topic}: {message_id}")
        return True
