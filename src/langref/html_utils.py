"""Shared HTML utilities for heading and anchor tags."""

from __future__ import annotations

import re
from dataclasses import dataclass

from bs4 import BeautifulSoup
from bs4.element import Tag


_HEADING_TAG_RE = re.compile(r"^h[1-6]$")
_ANCHOR_ID_ATTRS = ("id", "name")
_INLINE_ANCHOR_RE = re.compile(r"<a\s[^>]*?(?:/>|>.*?</a\s*>)", re.IGNORECASE)


@dataclass(frozen=True)
class HtmlHeading:
    """A heading extracted from a single-line ``<hN>`` tag."""

    level: int
    title: str
    anchor: str | None


def parse_html_heading(line: str) -> HtmlHeading | None:
    """Extract level, text, and id from a line like ``<h3 id="x">Title</h3>``.

    An ``id`` on the heading wins over an ``<a id>``/``<a name>`` nested inside it.
    """
    soup = BeautifulSoup(line, "lxml")
    heading = soup.find(_HEADING_TAG_RE)
    if not isinstance(heading, Tag):
        return None

    anchor = _clean_id(heading.get("id"))
    inner = heading.find("a", attrs={"id": True}) or heading.find("a", attrs={"name": True})
    if anchor is None and isinstance(inner, Tag):
        anchor = _anchor_of(inner)

    title = _normalize_text(heading.get_text())
    return HtmlHeading(level=int(heading.name[1]), title=title, anchor=anchor)


def extract_inline_anchor(title: str) -> tuple[str, str | None]:
    """Split ``Maps <a id="go-maps"></a>`` into (``Maps``, ``go-maps``).

    Only the ``<a>`` tags are parsed; the rest of the title is kept verbatim, so
    ``List<String>`` survives. Titles without an anchor tag are returned untouched.
    """
    anchor: str | None = None

    def _replace(match: re.Match[str]) -> str:
        nonlocal anchor
        link = BeautifulSoup(match.group(0), "lxml").find("a")
        if not isinstance(link, Tag):
            return match.group(0)
        candidate = _anchor_of(link)
        if candidate and not link.get("href"):
            anchor = anchor or candidate
            return link.get_text()
        return match.group(0)

    stripped = _INLINE_ANCHOR_RE.sub(_replace, title)
    if anchor is None:
        return title, None
    return _normalize_text(stripped), anchor


def parse_anchor_line(line: str) -> str | None:
    """Return the id when the line holds nothing but an empty ``<a id>`` tag."""
    stripped = line.strip()
    if not (stripped.lower().startswith("<a ") and stripped.lower().endswith("</a>")):
        return None
    soup = BeautifulSoup(stripped, "lxml")
    link = soup.find("a")
    if not isinstance(link, Tag) or link.get("href") or link.get_text(strip=True):
        return None
    return _anchor_of(link)


def _anchor_of(tag: Tag) -> str | None:
    for attr in _ANCHOR_ID_ATTRS:
        value = _clean_id(tag.get(attr))
        if value:
            return value
    return None


def _clean_id(value: object) -> str | None:
    if isinstance(value, list):
        value = " ".join(value)
    if not isinstance(value, str):
        return None
    value = value.strip()
    return value or None


def _normalize_text(text: str) -> str:
    return re.sub(r"\s+", " ", text).strip()
