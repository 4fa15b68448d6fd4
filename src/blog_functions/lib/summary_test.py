"""Tests for summary generation, retries and fallback."""

import logging

import pytest

from ..config import MAX_RETRIES, SUMMARY_MAX_WORDS, SUMMARY_MODEL
from ..errors import UpstreamRateLimitedError, UpstreamUnavailableError
from .summary import (
    calculate_retry_delay,
    create_fallback_summary,
    generate_blog_summary,
    generate_summary,
    prepare_content,
)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

WORDS_75 = " ".join(f"word{i}" for i in range(1, 76))


@pytest.fixture
def post():
    return {"title": "Async Python", "content": f"<p>{WORDS_75}</p>"}


class FakeGenAI:
    """Fake Gemini client that plays back a list of outcomes.

    Each outcome is either a response dict or an exception to raise; the
    last outcome repeats once the list is exhausted.
    """

    def __init__(self, outcomes):
        self._outcomes = list(outcomes)
        self.calls: list[dict] = []

    async def generate_content(self, model, prompt, config=None):
        self.calls.append({"model": model, "prompt": prompt, "config": config})
        outcome = self._outcomes.pop(0) if len(self._outcomes) > 1 else self._outcomes[0]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


class RecordingSleep:
    def __init__(self):
        self.delays: list[float] = []

    async def __call__(self, seconds):
        self.delays.append(seconds)


def no_jitter():
    return 0.0


# ---------------------------------------------------------------------------
# Single attempt
# ---------------------------------------------------------------------------

class TestGenerateSummary:
    @pytest.mark.asyncio
    async def test_reads_text_field(self, post):
        genai = FakeGenAI([{"text": "  A short summary.  "}])
        assert await generate_summary(genai, post) == "A short summary."

        call = genai.calls[0]
        assert call["model"] == SUMMARY_MODEL
        assert 'titled "Async Python"' in call["prompt"]
        assert call["config"]["thinking_budget"] == 0

    @pytest.mark.asyncio
    async def test_reads_candidates_shape(self, post):
        genai = FakeGenAI([
            {"candidates": [{"content": {"parts": [{"text": "From candidates"}]}}]}
        ])
        assert await generate_summary(genai, post) == "From candidates"

    @pytest.mark.asyncio
    async def test_blank_result_raises(self, post):
        genai = FakeGenAI([{"text": "   "}])
        with pytest.raises(Exception, match="Empty summary generated"):
            await generate_summary(genai, post)

    @pytest.mark.asyncio
    async def test_prompt_contains_plain_text(self):
        genai = FakeGenAI([{"text": "ok"}])
        await generate_summary(genai, {"title": "T", "content": "<script>x</script><p>Hi <b>there</b></p>"})
        prompt = genai.calls[0]["prompt"]
        assert '"Hi there"' in prompt
        assert "<script>" not in prompt


class TestPrepareContent:
    def test_short_content_is_unchanged(self):
        assert prepare_content("<p>Hello</p>") == "Hello"

    def test_long_content_is_capped_by_word_guard(self):
        assert len(prepare_content("a" * 5000)) == SUMMARY_MAX_WORDS * 4


# ---------------------------------------------------------------------------
# Backoff and fallback
# ---------------------------------------------------------------------------

class TestCalculateRetryDelay:
    def test_exponential_without_jitter(self):
        delays = [calculate_retry_delay(r, rand=no_jitter) for r in (3, 2, 1)]
        assert delays == [10_000, 20_000, 40_000]

    def test_jitter_stays_below_one_second(self):
        assert calculate_retry_delay(3, rand=lambda: 0.9999) == 10_999


class TestCreateFallbackSummary:
    def test_truncated_content(self, post):
        expected = " ".join(f"word{i}" for i in range(1, 71)) + "..."
        assert create_fallback_summary(post) == expected

    def test_short_content(self):
        content = " ".join(f"word{i}" for i in range(1, 11))
        assert create_fallback_summary({"content": f"<div>{content}</div>"}) == content


class TestGenerateBlogSummary:
    @pytest.mark.asyncio
    async def test_success_first_try(self, post):
        genai = FakeGenAI([{"text": "Great post."}])
        sleep = RecordingSleep()
        assert await generate_blog_summary(genai, post, sleep=sleep) == "Great post."
        assert len(genai.calls) == 1
        assert sleep.delays == []

    @pytest.mark.asyncio
    async def test_always_rate_limited_falls_back(self, post):
        genai = FakeGenAI([UpstreamRateLimitedError("rate limited")])
        sleep = RecordingSleep()

        summary = await generate_blog_summary(genai, post, sleep=sleep, rand=no_jitter)

        assert summary == create_fallback_summary(post)
        assert len(genai.calls) == MAX_RETRIES + 1
        assert sleep.delays == [10.0, 20.0, 40.0]

    @pytest.mark.asyncio
    async def test_delays_are_jittered(self, post):
        genai = FakeGenAI([UpstreamRateLimitedError("rate limited")])
        sleep = RecordingSleep()
        await generate_blog_summary(genai, post, sleep=sleep, rand=lambda: 0.5)
        assert sleep.delays == [10.5, 20.5, 40.5]

    @pytest.mark.asyncio
    async def test_recovers_after_rate_limit(self, post):
        genai = FakeGenAI([UpstreamRateLimitedError("rate limited"), {"text": "Second time lucky."}])
        sleep = RecordingSleep()
        summary = await generate_blog_summary(genai, post, sleep=sleep, rand=no_jitter)
        assert summary == "Second time lucky."
        assert len(genai.calls) == 2
        assert sleep.delays == [10.0]

    @pytest.mark.asyncio
    async def test_other_errors_fall_back_without_retry(self, post):
        genai = FakeGenAI([UpstreamUnavailableError("boom")])
        sleep = RecordingSleep()
        summary = await generate_blog_summary(genai, post, sleep=sleep)
        assert summary == create_fallback_summary(post)
        assert len(genai.calls) == 1
        assert sleep.delays == []

    @pytest.mark.asyncio
    async def test_unexpected_exceptions_fall_back(self, post):
        genai = FakeGenAI([RuntimeError("unexpected")])
        summary = await generate_blog_summary(genai, post, sleep=RecordingSleep())
        assert summary == create_fallback_summary(post)

    @pytest.mark.asyncio
    async def test_blank_result_falls_back(self, post):
        genai = FakeGenAI([{"text": ""}])
        summary = await generate_blog_summary(genai, post, sleep=RecordingSleep())
        assert summary == create_fallback_summary(post)
        assert len(genai.calls) == 1

    @pytest.mark.asyncio
    async def test_zero_retries_falls_back_on_first_rate_limit(self, post):
        genai = FakeGenAI([UpstreamRateLimitedError("rate limited")])
        sleep = RecordingSleep()
        await generate_blog_summary(genai, post, max_retries=0, sleep=sleep)
        assert len(genai.calls) == 1
        assert sleep.delays == []

    @pytest.mark.asyncio
    async def test_shorter_budget_uses_the_tail_of_the_full_backoff(self, post):
        genai = FakeGenAI([UpstreamRateLimitedError("rate limited")])
        sleep = RecordingSleep()
        await generate_blog_summary(genai, post, max_retries=1, sleep=sleep, rand=no_jitter)
        assert len(genai.calls) == 2
        assert sleep.delays == [40.0]

    @pytest.mark.asyncio
    async def test_logs_retries_and_fallback(self, post, caplog):
        caplog.set_level(logging.INFO)
        genai = FakeGenAI([UpstreamRateLimitedError("rate limited")])
        await generate_blog_summary(genai, post, sleep=RecordingSleep(), rand=no_jitter)
        assert "Retrying in 10.00s... (3 retries left)" in caplog.text
        assert "Using fallback summary generation" in caplog.text
