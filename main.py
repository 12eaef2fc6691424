import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from hillpulse import __version__
from hillpulse.api import feed, ingest
from hillpulse.api.dependencies import request_is_authorized
from hillpulse.container import Services, build_services
from hillpulse.core.config import Settings
from hillpulse.core.errors import HillPulseError, MissingInputError, UnauthorizedError
from hillpulse.core.logging import log
from hillpulse.db.database import init_db
from hillpulse.schemas.summary import ErrorResponse


def create_app(services: Services | None = None) -> FastAPI:
    app = FastAPI(title="HillPulse", version=__version__)
    app.state.services = services

    @app.on_event("startup")
    async def on_startup():
        if app.state.services is None:
            app.state.services = build_services(Settings.from_env())
        settings = app.state.services.settings
        log.info("🟢 Backend started")
        log.info(
            f"Settings: GEMINI_MODEL={settings.gemini_model}, DATABASE={'set' if settings.database_url else 'unset'}, "
            f"FCM={'enabled' if app.state.services.notifier.enabled else 'disabled'}, "
            f"MAX_RETRIES={settings.summarize_max_retries}, RETRY_DELAY={settings.summarize_retry_delay}")
        if not settings.ingest_secret:
            log.warning("⚠️ INGEST_SECRET is not set. /ingest accepts unauthenticated requests.")
        await init_db(app.state.services.engine)

    @app.on_event("shutdown")
    async def on_shutdown():
        if app.state.services is not None:
            await app.state.services.close()
        log.info("🔴 Backend stopped")

    @app.exception_handler(HillPulseError)
    async def hillpulse_error_handler(request: Request, exc: HillPulseError):
        if exc.status_code >= 500:
            log.error(f"❌ {request.method} {request.url.path} failed: {exc}")
        else:
            log.warning(f"🚫 {request.method} {request.url.path} rejected: {exc}")
        return JSONResponse(status_code=exc.status_code, content=ErrorResponse(error=str(exc)).model_dump())

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        # the body is parsed before dependencies run, so auth is checked here too
        if not request_is_authorized(request, app.state.services):
            return await hillpulse_error_handler(request, UnauthorizedError())
        if all(err.get("type") == "missing" and tuple(err.get("loc", ())) == ("body",) for err in exc.errors()):
            return await hillpulse_error_handler(request, MissingInputError())
        return await hillpulse_error_handler(request, MissingInputError("Invalid request body"))

    app.include_router(feed.router)
    app.include_router(ingest.router)
    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=Settings.from_env().port)
