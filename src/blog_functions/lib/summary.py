"""Post summary generation with rate-limit retries and a deterministic fallback.

Flow for one request::

    Attempting(n) --ok--------------------------> Done
    Attempting(n) --429, n > 0--> Backoff(n) ---> Attempting(n - 1)
    Attempting(n) --429 at n == 0, other error,
                    or blank text--------------> Fallback -> Done

``generate_blog_summary`` never raises; the worst outcome is the first-words
fallback.
"""

import asyncio
import logging
import random
from collections.abc import Awaitable, Callable, Mapping
from typing import Any

from ..config import (
    MAX_CONTENT_LENGTH,
    MAX_RETRIES,
    RETRY_BASE_DELAY_MS,
    RETRY_MAX_JITTER_MS,
    SUMMARY_GENERATION_CONFIG,
    SUMMARY_MAX_WORDS,
    SUMMARY_MODEL,
)
from ..errors import UpstreamEmptyResultError, UpstreamRateLimitedError
from .genai import extract_text
from .text import extract_first_words, strip_html_tags, truncate_content

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[Any]]


PROMPT_TEMPLATE = """
Generate a concise and engaging summary for the following blog post titled "{title}".
Requirements:
  - Capture the main points and key takeaways
  - Make it compelling to entice readers
  - Length: {max_words} words
  - Write in an engaging, professional tone
  - the summary should be in plain text without any markdown or special formatting
Content:
  "{content}"
"""


def build_prompt(title: str, content: str) -> str:
    return PROMPT_TEMPLATE.format(title=title, content=content, max_words=SUMMARY_MAX_WORDS)


def prepare_content(content: str | None) -> str:
    """Strip HTML and cut the text down to what is sent to the model."""
    text = truncate_content(strip_html_tags(content), MAX_CONTENT_LENGTH)
    # Rough words-per-character guard on top of the hard character cap.
    if len(text) / 4 > SUMMARY_MAX_WORDS:
        text = text[: SUMMARY_MAX_WORDS * 4]
    return text


async def generate_summary(genai, post: Mapping[str, Any]) -> str:
    """Make a single summary call. Raises on any failure, including blank output."""
    prompt = build_prompt(post.get("title"), prepare_content(post.get("content")))

    logger.info("Generating summary with Gemini API")
    response = await genai.generate_content(SUMMARY_MODEL, prompt, SUMMARY_GENERATION_CONFIG)

    summary = extract_text(response)
    if not summary.strip():
        raise UpstreamEmptyResultError("Empty summary generated")

    logger.info("Summary generated successfully")
    return summary.strip()


def calculate_retry_delay(
    remaining: int,
    rand: Callable[[], float] = random.random,
) -> int:
    """Backoff delay in milliseconds before the retry taken with *remaining* retries left.

    The exponent is counted from ``MAX_RETRIES`` whatever budget the caller
    started with, so a shorter budget waits as long as the last retries of a
    full one.
    """
    exponential = 2 ** (MAX_RETRIES - remaining) * RETRY_BASE_DELAY_MS
    jitter = int(rand() * RETRY_MAX_JITTER_MS)
    return exponential + jitter


def create_fallback_summary(post: Mapping[str, Any]) -> str:
    """First ``SUMMARY_MAX_WORDS`` words of the post's plain text."""
    return extract_first_words(strip_html_tags(post.get("content")), SUMMARY_MAX_WORDS)


async def generate_blog_summary(
    genai,
    post: Mapping[str, Any],
    max_retries: int = MAX_RETRIES,
    *,
    sleep: Sleep = asyncio.sleep,
    rand: Callable[[], float] = random.random,
) -> str:
    """Generate a summary, retrying rate limits with backoff, else fall back.

    *sleep* (seconds) and *rand* (uniform in [0, 1)) are injectable so the
    backoff can be driven without real waiting.
    """
    remaining = max_retries
    while True:
        try:
            return await generate_summary(genai, post)
        except UpstreamRateLimitedError as exc:
            if remaining <= 0:
                logger.error("Generate blog summary error: %s", exc)
                break
            delay_ms = calculate_retry_delay(remaining, rand=rand)
            logger.info(
                "Rate limited. Retrying in %.2fs... (%d retries left)",
                delay_ms / 1000,
                remaining,
            )
            await sleep(delay_ms / 1000)
            remaining -= 1
        except Exception as exc:
            logger.error("Generate blog summary error: %s", exc)
            break

    logger.info("Using fallback summary generation")
    return create_fallback_summary(post)
