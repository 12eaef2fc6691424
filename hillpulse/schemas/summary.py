from datetime import datetime

from pydantic import BaseModel, ConfigDict


class TweetPayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    text: str | None = None
    url: str | None = None
    author: str | None = None


class IngestRequest(TweetPayload):
    """Tweet fields either at the top level or wrapped in ``data``."""

    data: TweetPayload | None = None

    def tweet(self) -> TweetPayload:
        inner = self.data or TweetPayload()
        return TweetPayload(
            text=inner.text or self.text,
            url=inner.url or self.url,
            author=inner.author or self.author,
        )


class IngestResponse(BaseModel):
    ok: bool = True
    summary: str
    author: str | None = None
    url: str | None = None
    saved: bool
    pushed: bool


class FeedItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    summary_text: str
    tweet_author: str | None = None
    tweet_url: str | None = None
    created_at: datetime | None = None


class FeedResponse(BaseModel):
    ok: bool = True
    feed: list[FeedItem]


class ErrorResponse(BaseModel):
    ok: bool = False
    error: str
