"""Text helpers shared by the extractor and the AI layer."""

from __future__ import annotations

import re

URL_PATTERN = re.compile(
    r"(https?://[^\s]+)|(www\.[^\s]+)"
    r"|([a-zA-Z0-9-]+\.[a-zA-Z]{2,}(?:\.[a-zA-Z]{2,})?(?:/[^\s]*)?)"
)
EMAIL_PATTERN = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")


def detect_urls(text: str) -> list[str]:
    """Return every URL, www-address or bare domain found in *text*."""
    return [match.group(0) for match in URL_PATTERN.finditer(text)]


def looks_like_address(token: str) -> bool:
    """True when *token* is (or starts with) a URL, domain or email address."""
    return bool(EMAIL_PATTERN.match(token) or URL_PATTERN.match(token))


def capitalize_first(text: str) -> str:
    """Uppercase the first character of *text* and nothing else.

    A leading URL, domain or email address is left exactly as typed.
    """
    if not text:
        return text
    first_token = text.split(maxsplit=1)[0]
    if looks_like_address(first_token):
        return text
    return text[0].upper() + text[1:]


def cut_spans(text: str, spans: list[tuple[int, int]]) -> str:
    """Remove ``(start, end)`` spans from *text*.

    Whitespace around each cut collapses into a single space; the result is
    stripped. Characters outside the spans are kept byte for byte.

    Args:
        text: Source text
        spans: Non-overlapping half-open index ranges

    Returns:
        The text with every span removed
    """
    result = text
    for start, end in sorted(spans, reverse=True):
        left = result[:start].rstrip()
        right = result[end:].lstrip()
        result = f"{left} {right}" if left and right else left + right
    return result.strip()
