"""Plain-text helpers used to prepare post content for the model."""

import re

from bs4 import BeautifulSoup

_WHITESPACE_RE = re.compile(r"\s+")

ELLIPSIS = "..."


def strip_html_tags(content: str | None) -> str:
    """Return the plain text of an HTML fragment.

    ``<script>`` and ``<style>`` elements are dropped together with their
    contents, every other tag becomes a word break, and runs of whitespace
    collapse to a single space.
    """
    if not content:
        return ""
    soup = BeautifulSoup(content, "html.parser")
    for el in soup.find_all(["script", "style"]):
        el.decompose()
    text = soup.get_text(" ")
    return _WHITESPACE_RE.sub(" ", text).strip()


def truncate_content(content: str, max_length: int) -> str:
    """Hard-cut *content* to *max_length* characters, marking the cut with an ellipsis."""
    if len(content) <= max_length:
        return content
    return content[:max_length] + ELLIPSIS


def extract_first_words(content: str, max_words: int) -> str:
    """Return the first *max_words* words of *content*.

    An ellipsis is appended when the word cap was reached.
    """
    words = [w for w in content.split() if w][:max_words]
    suffix = ELLIPSIS if len(words) >= max_words else ""
    return " ".join(words) + suffix
