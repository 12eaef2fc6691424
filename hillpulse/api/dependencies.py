import hmac

from fastapi import Depends, Request

from hillpulse.container import Services
from hillpulse.core.errors import UnauthorizedError


def get_services(request: Request) -> Services:
    return request.app.state.services


def is_authorized(secret: str, authorization: str | None, api_key: str | None) -> bool:
    """Accepts ``Bearer <secret>``, the bare secret, or the ``X-HillPulse-Key`` header."""
    if not secret:
        return True

    candidates = []
    if api_key:
        candidates.append(api_key.strip())
    if authorization:
        authorization = authorization.strip()
        scheme, _, token = authorization.partition(" ")
        candidates.append(token.strip() if scheme.lower() == "bearer" else authorization)

    return any(hmac.compare_digest(c.encode(), secret.encode()) for c in candidates)


def request_is_authorized(request: Request, services: Services) -> bool:
    return is_authorized(
        services.settings.ingest_secret,
        request.headers.get("Authorization"),
        request.headers.get("X-HillPulse-Key"),
    )


def require_ingest_key(request: Request, services: Services = Depends(get_services)) -> None:
    if not request_is_authorized(request, services):
        raise UnauthorizedError()
