"""Anchor assignment, validation, and link checking."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Iterable, Sequence

from langref.exceptions import DuplicateAnchorError
from langref.schemas import BrokenLink, Document, Prose

logger = logging.getLogger(__name__)

_SLUG_STRIP_RE = re.compile(r"[^\w\- ]", re.UNICODE)
_MARKDOWN_LINK_RE = re.compile(r"\]\(#(?P<target>[^)\s]+)\)")
_HTML_HREF_RE = re.compile(r"""href\s*=\s*["']#(?P<target>[^"']+)["']""", re.IGNORECASE)
_FALLBACK_SLUG = "section"


@dataclass(frozen=True)
class HeadingRef:
    """What the indexer needs to know about a heading."""

    title: str
    line: int
    explicit_anchor: str | None = None


def slugify(title: str) -> str:
    """GitHub-style slug: lowercase, drop punctuation, spaces become hyphens."""
    slug = _SLUG_STRIP_RE.sub("", title.strip().lower()).replace(" ", "-")
    return slug or _FALLBACK_SLUG


def assign_anchors(headings: Sequence[HeadingRef]) -> list[str]:
    """Return one unique anchor per heading, in order.

    Explicit ids are reserved first so generated slugs never shadow them; a
    repeated explicit id raises ``DuplicateAnchorError``. Generated slugs that
    collide get ``-1``, ``-2``, ... appended.
    """
    taken: dict[str, int] = {}
    for heading in headings:
        anchor = heading.explicit_anchor
        if anchor is None:
            continue
        if anchor in taken:
            raise DuplicateAnchorError(anchor, first_line=taken[anchor], line=heading.line)
        taken[anchor] = heading.line

    anchors: list[str] = []
    for heading in headings:
        if heading.explicit_anchor is not None:
            anchors.append(heading.explicit_anchor)
            continue
        base = slugify(heading.title)
        anchor = base
        suffix = 0
        while anchor in taken:
            suffix += 1
            anchor = f"{base}-{suffix}"
        taken[anchor] = heading.line
        anchors.append(anchor)
    return anchors


def validate_anchors(document: Document) -> None:
    """Raise ``DuplicateAnchorError`` if two sections share an anchor."""
    seen: dict[str, int] = {}
    for section in document.iter_sections():
        if section.anchor in seen:
            raise DuplicateAnchorError(section.anchor, first_line=seen[section.anchor], line=section.line)
        seen[section.anchor] = section.line


def find_broken_links(document: Document) -> list[BrokenLink]:
    """List ``#anchor`` links in prose that point at no heading."""
    known = set(document.anchors)
    broken: list[BrokenLink] = []

    broken.extend(_check_blocks(document.preamble, known, section_anchor=None))
    for section in document.iter_sections():
        broken.extend(_check_blocks(section.blocks, known, section_anchor=section.anchor))

    if broken:
        logger.debug("Found broken links", extra={"count": len(broken)})
    return broken


def _check_blocks(blocks: Iterable[object], known: set[str], *, section_anchor: str | None) -> list[BrokenLink]:
    broken: list[BrokenLink] = []
    for block in blocks:
        if not isinstance(block, Prose):
            continue
        for offset, text in enumerate(block.text.split("\n")):
            for target in _iter_link_targets(text):
                if target not in known:
                    broken.append(
                        BrokenLink(target=target, line=block.line + offset, section_anchor=section_anchor)
                    )
    return broken


def _iter_link_targets(text: str) -> Iterable[str]:
    for match in _MARKDOWN_LINK_RE.finditer(text):
        yield match.group("target")
    for match in _HTML_HREF_RE.finditer(text):
        yield match.group("target")
