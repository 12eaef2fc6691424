from dataclasses import dataclass
from time import time

from starlette.concurrency import run_in_threadpool

from hillpulse.container import Services
from hillpulse.core.errors import MissingInputError
from hillpulse.core.logging import log
from hillpulse.schemas.summary import TweetPayload
from hillpulse.services.tweets import author_from_url, fetch_tweet_text


@dataclass
class IngestResult:
    summary: str
    author: str | None
    url: str | None
    saved: bool
    pushed: bool


async def ingest_tweet(tweet: TweetPayload, services: Services) -> IngestResult:
    """Fetch (if needed), summarize, store and announce one tweet.

    Steps run strictly in order. Summarization failures propagate; storage
    and push failures only flip ``saved``/``pushed``.
    """
    start_time = time()
    url = (tweet.url or "").strip()
    author = tweet.author or author_from_url(url)
    log.info(f"📥 Ingesting tweet url={url or '-'} author={author or '-'}")

    text = (tweet.text or "").strip()
    if not text and url:
        text = await run_in_threadpool(fetch_tweet_text, url)
    if not text:
        raise MissingInputError()

    summary = await run_in_threadpool(services.summarizer.summarize, text, author, url)

    saved = await services.repository.insert(summary, author, url)
    pushed = await run_in_threadpool(
        services.notifier.publish, services.settings.notification_title, summary, url
    )

    log.info(
        f"✅ Ingested url={url or '-'} saved={saved} pushed={pushed} "
        f"duration={round(time() - start_time, 2)} sec"
    )
    return IngestResult(summary=summary, author=author, url=url or None, saved=saved, pushed=pushed)
