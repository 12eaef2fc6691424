import re

import requests

from hillpulse.core.logging import log

OEMBED_URL = "https://publish.twitter.com/oembed"
SYNDICATION_URL = "https://cdn.syndication.twimg.com/widgets/tweet"

_PARAGRAPH = re.compile(r"<p[^>]*>(.*?)</p>")
_TAG = re.compile(r"<[^>]+>")
_AUTHOR = re.compile(r"(?:x|twitter)\.com/([^/]+)/")

# Only these five are decoded; oEmbed snippets rarely carry anything else.
_ENTITIES = (
    ("&amp;", "&"),
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&quot;", '"'),
    ("&#39;", "'"),
)


def author_from_url(url: str | None) -> str | None:
    if not url:
        return None
    match = _AUTHOR.search(url)
    return match.group(1) if match else None


def html_snippet_text(html: str) -> str:
    """Plain text of the first ``<p>`` in an oEmbed HTML fragment, or ''."""
    match = _PARAGRAPH.search(html or "")
    if not match:
        return ""
    text = _TAG.sub("", match.group(1))
    for entity, char in _ENTITIES:
        text = text.replace(entity, char)
    return text


def _from_oembed(url: str, timeout: int) -> str:
    response = requests.get(
        OEMBED_URL,
        params={"omit_script": 1, "hide_thread": 1, "url": url},
        timeout=timeout,
    )
    if not response.ok:
        log.info(f"🔎 oEmbed lookup returned {response.status_code} for {url}")
        return ""
    return html_snippet_text(response.json().get("html", ""))


def _from_syndication(url: str, timeout: int) -> str:
    response = requests.get(SYNDICATION_URL, params={"url": url}, timeout=timeout)
    if not response.ok:
        log.info(f"🔎 Syndication lookup returned {response.status_code} for {url}")
        return ""
    return response.json().get("text") or ""


def fetch_tweet_text(url: str | None, timeout: int = 10) -> str:
    """Best-effort tweet text lookup. Never raises; returns '' when nothing was found."""
    if not url:
        return ""

    for lookup in (_from_oembed, _from_syndication):
        try:
            text = lookup(url, timeout)
        except Exception as e:
            log.error(f"❌ Tweet fetch via {lookup.__name__[6:]} failed for {url}: {e}")
            continue
        if text:
            return text
    return ""
