from __future__ import annotations

import pytest
import requests

from hillpulse.core.errors import MissingInputError, NotConfiguredError, SummarizationError
from hillpulse.services.gemini import GeminiClient, build_prompt, extract_text


class FakeResponse:
    def __init__(self, status_code: int = 200, payload=None, text: str = ""):
        self.status_code = status_code
        self.payload = payload
        self.text = text

    @property
    def ok(self):
        return 200 <= self.status_code < 300

    def json(self):
        if self.payload is None:
            raise ValueError("no JSON")
        return self.payload


def gemini_payload(text: str) -> dict:
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


class FakeHttp:
    """Plays back one outcome per POST; exceptions are raised, responses returned."""

    def __init__(self, outcomes):
        self.outcomes = list(outcomes)
        self.calls = []

    def post(self, url, params=None, json=None, timeout=None):
        self.calls.append({"url": url, "params": params, "json": json, "timeout": timeout})
        outcome = self.outcomes.pop(0) if len(self.outcomes) > 1 else self.outcomes[0]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


def make_client(outcomes, sleeps):
    return GeminiClient(api_key="k", http=FakeHttp(outcomes), sleep=sleeps.append)


def test_returns_trimmed_summary_on_first_success():
    sleeps = []
    client = make_client([FakeResponse(payload=gemini_payload("  @pol: Senate confirms nominee \n"))], sleeps)

    assert client.summarize("Senate vote", "pol", "https://x.com/pol/status/1") == "@pol: Senate confirms nominee"
    assert sleeps == []
    call = client.http.calls[0]
    assert call["url"].endswith("/gemini-2.5-flash-lite:generateContent")
    assert call["params"] == {"key": "k"}
    assert "Tweet text: Senate vote" in call["json"]["contents"][0]["parts"][0]["text"]


def test_recovers_after_three_failures_and_waits_between_attempts():
    sleeps = []
    client = make_client(
        [
            requests.ConnectionError("reset"),
            FakeResponse(503),
            FakeResponse(500, text="boom"),
            FakeResponse(payload=gemini_payload("@pol: recovered")),
        ],
        sleeps,
    )
    client.retry_delay = 8.0

    assert client.summarize("text") == "@pol: recovered"
    assert len(client.http.calls) == 4
    assert sleeps == [8.0, 8.0, 8.0]
    assert sum(sleeps) >= 3 * 8


def test_always_failing_backend_raises_after_exactly_six_attempts():
    sleeps = []
    client = make_client([FakeResponse(503)], sleeps)

    with pytest.raises(SummarizationError) as exc_info:
        client.summarize("text")

    assert len(client.http.calls) == 6
    assert len(sleeps) == 5
    assert "after 6 attempts" in str(exc_info.value)
    assert "overload 503" in str(exc_info.value.last_error)


def test_last_failure_reason_is_reported():
    sleeps = []
    client = make_client([FakeResponse(503)] * 5 + [FakeResponse(429, text="quota exceeded")], sleeps)

    with pytest.raises(SummarizationError, match="Gemini error 429: quota exceeded"):
        client.summarize("text")


def test_empty_summary_is_retried():
    sleeps = []
    client = make_client(
        [FakeResponse(payload=gemini_payload("   ")), FakeResponse(payload=gemini_payload("@pol: second try"))],
        sleeps,
    )

    assert client.summarize("text") == "@pol: second try"
    assert len(sleeps) == 1


def test_invalid_json_is_retried():
    sleeps = []
    client = make_client([FakeResponse(payload=None), FakeResponse(payload=gemini_payload("@pol: ok"))], sleeps)

    assert client.summarize("text") == "@pol: ok"


def test_empty_text_makes_no_call():
    client = make_client([FakeResponse(payload=gemini_payload("x"))], [])

    with pytest.raises(MissingInputError):
        client.summarize("   ")
    assert client.http.calls == []


def test_missing_api_key_makes_no_call():
    client = GeminiClient(api_key="", http=FakeHttp([FakeResponse(payload=gemini_payload("x"))]), sleep=lambda s: None)

    with pytest.raises(NotConfiguredError):
        client.summarize("text")
    assert client.http.calls == []


def test_prompt_carries_author_and_url():
    prompt = build_prompt("Big news", "SpeakerJohnson", "https://x.com/SpeakerJohnson/status/9")

    assert "6–17 words" in prompt
    assert "Tweet author: @SpeakerJohnson" in prompt
    assert prompt.endswith("Tweet URL: https://x.com/SpeakerJohnson/status/9")


def test_extract_text_handles_missing_candidates():
    assert extract_text({}) == ""
    assert extract_text({"candidates": []}) == ""
    assert extract_text({"candidates": [{"content": {"parts": [{}]}}]}) == ""
