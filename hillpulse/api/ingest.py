from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from hillpulse.api.dependencies import get_services, require_ingest_key
from hillpulse.container import Services
from hillpulse.core.errors import HillPulseError
from hillpulse.core.logging import log
from hillpulse.schemas.summary import ErrorResponse, IngestRequest, IngestResponse
from hillpulse.services.ingest import ingest_tweet

router = APIRouter()


@router.post(
    "/ingest",
    response_model=IngestResponse,
    responses={400: {"model": ErrorResponse}, 401: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    dependencies=[Depends(require_ingest_key)],
)
async def ingest(request: IngestRequest, services: Services = Depends(get_services)):
    try:
        result = await ingest_tweet(request.tweet(), services)
    except HillPulseError:
        raise
    except Exception as e:
        log.error(f"❌ Ingest failed: {e}")
        return JSONResponse(status_code=500, content=ErrorResponse(error=str(e)).model_dump())

    return IngestResponse(
        summary=result.summary,
        author=result.author,
        url=result.url,
        saved=result.saved,
        pushed=result.pushed,
    )
