from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse

from hillpulse import __version__
from hillpulse.api.dependencies import get_services
from hillpulse.container import Services
from hillpulse.core.config import FEED_LIMIT
from hillpulse.schemas.summary import ErrorResponse, FeedItem, FeedResponse

router = APIRouter()


@router.get("/", response_class=PlainTextResponse)
def liveness():
    return f"HillPulse v{__version__} running with Gemini, Postgres & FCM"


@router.get("/feed", response_model=FeedResponse, responses={500: {"model": ErrorResponse}})
async def feed(services: Services = Depends(get_services)):
    rows = await services.repository.recent(FEED_LIMIT)
    return FeedResponse(feed=[FeedItem.model_validate(row) for row in rows])
