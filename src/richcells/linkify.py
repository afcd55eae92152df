"""Plain-text fallback: escape, then turn URLs, www. hosts and emails into anchors."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from richcells.renderer import anchor, escape_body

if TYPE_CHECKING:
    from collections.abc import Callable

# Matched against escaped text: a URL stops before whitespace, "<", ")" and
# before an escaped angle bracket.
_URL_RE = re.compile(r"\b(?:https?|ftp)://(?:(?!&lt;|&gt;)[^\s<)])+", re.IGNORECASE)
_WWW_RE = re.compile(r"(?<![\w./@-])www\.(?:(?!&lt;|&gt;)[^\s<)])+", re.IGNORECASE)
_EMAIL_RE = re.compile(r"(?<![\w.%+-])[A-Z0-9._%+-]+@[A-Z0-9.-]+\.[A-Z]{2,}\b", re.IGNORECASE)

# Anchors produced by earlier steps; later steps leave them untouched.
_ANCHOR_RE = re.compile(r"(<a\s[^>]*>.*?</a>)", re.DOTALL)

_TRAILING = ".,)"


def _href(value: str) -> str:
    # Already body-escaped, so only the quote still needs care.
    return value.replace('"', "&quot;")


def _split_trailing(token: str) -> tuple[str, str]:
    stripped = token.rstrip(_TRAILING)
    return stripped, token[len(stripped) :]


def _link_url(match: re.Match[str]) -> str:
    url, tail = _split_trailing(match.group(0))
    if "://" not in url or url.endswith("://"):
        return match.group(0)
    return anchor(_href(url), url) + tail


def _link_www(match: re.Match[str]) -> str:
    host, tail = _split_trailing(match.group(0))
    if host.lower() == "www":
        return match.group(0)
    return anchor(_href(f"https://{host}"), host) + tail


def _link_email(match: re.Match[str]) -> str:
    address = match.group(0)
    return anchor(_href(f"mailto:{address}"), address)


def _sub_outside_anchors(
    pattern: re.Pattern[str], repl: Callable[[re.Match[str]], str], html: str
) -> str:
    parts = _ANCHOR_RE.split(html)
    # re.split with one capture group alternates text, anchor, text, ...
    for i in range(0, len(parts), 2):
        parts[i] = pattern.sub(repl, parts[i])
    return "".join(parts)


def linkify(text: str) -> str:
    html = escape_body(text)
    html = _URL_RE.sub(_link_url, html)
    html = _sub_outside_anchors(_WWW_RE, _link_www, html)
    html = _sub_outside_anchors(_EMAIL_RE, _link_email, html)
    return html.replace("\n", "<br>")
