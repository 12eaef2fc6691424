import time
from typing import Callable

import requests

from hillpulse.core.config import DEFAULT_GEMINI_MODEL, GEMINI_API_BASE
from hillpulse.core.errors import MissingInputError, NotConfiguredError, SummarizationError
from hillpulse.core.logging import log

OVERLOADED_STATUS = 503

PROMPT = (
    "Summarize this tweet for Hill comms staff in 6–17 words. Aim for around 180 characters. "
    "Use shorthand and abbreviations when clear. Be factual and neutral. "
    "Always start with @username: ..."
)


class GeminiRequestError(Exception):
    """One failed attempt against the Gemini API."""


def build_prompt(text: str, author: str | None, url: str | None) -> str:
    return f"{PROMPT}\n\nTweet text: {text}\nTweet author: @{author or ''}\nTweet URL: {url or ''}"


def extract_text(data: dict) -> str:
    try:
        return (data["candidates"][0]["content"]["parts"][0].get("text") or "").strip()
    except (KeyError, IndexError, TypeError, AttributeError):
        return ""


class GeminiClient:
    """Gemini generateContent call retried at a fixed delay; ``sleep`` is injectable."""

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_GEMINI_MODEL,
        max_retries: int = 5,
        retry_delay: float = 8.0,
        timeout: int = 30,
        http: requests.Session | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.api_key = api_key
        self.model = model
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self.timeout = timeout
        self.http = http or requests.Session()
        self.sleep = sleep

    @property
    def endpoint(self) -> str:
        return f"{GEMINI_API_BASE}/{self.model}:generateContent"

    def _attempt(self, body: dict) -> str:
        try:
            response = self.http.post(
                self.endpoint,
                params={"key": self.api_key},
                json=body,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise GeminiRequestError(f"request failed: {e}") from e

        if response.status_code == OVERLOADED_STATUS:
            raise GeminiRequestError(f"Gemini overload {OVERLOADED_STATUS}")
        if not response.ok:
            raise GeminiRequestError(f"Gemini error {response.status_code}: {response.text}")

        try:
            data = response.json()
        except ValueError as e:
            raise GeminiRequestError(f"invalid JSON in response: {e}") from e

        summary = extract_text(data)
        if not summary:
            raise GeminiRequestError("Gemini returned an empty summary")
        return summary

    def summarize(self, text: str, author: str | None = None, url: str | None = None) -> str:
        if not text or not text.strip():
            raise MissingInputError()
        if not self.api_key:
            raise NotConfiguredError("Missing GEMINI_API_KEY")

        body = {"contents": [{"role": "user", "parts": [{"text": build_prompt(text, author, url)}]}]}
        attempts = self.max_retries + 1
        last_error: GeminiRequestError | None = None

        for attempt in range(1, attempts + 1):
            started = time.time()
            try:
                summary = self._attempt(body)
            except GeminiRequestError as e:
                last_error = e
                if attempt < attempts:
                    log.warning(
                        f"⏳ Gemini attempt {attempt} failed ({e}). Retrying in {self.retry_delay:g}s..."
                    )
                    self.sleep(self.retry_delay)
                continue

            log.info(f"📨 Gemini summary in {round(time.time() - started, 2)}s (attempt {attempt}): {summary}")
            return summary

        raise SummarizationError(f"Gemini failed after {attempts} attempts: {last_error}", last_error=last_error)
