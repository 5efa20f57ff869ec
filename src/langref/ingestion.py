"""Indexing pipeline: load -> parse -> filter -> render."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal

from langref.anchors import find_broken_links
from langref.config import LANGREF_TOC_DEPTH
from langref.loader import load_document
from langref.output_formatter import format_document
from langref.parser import parse
from langref.schemas import Document, IndexResult
from langref.sections import filter_blocks, filter_languages, filter_sections

logger = logging.getLogger(__name__)


@dataclass
class IndexOptions:
    """Options for building an index.

    Attributes:
        include_toc: If True, prepend the table of contents to the content.
        toc_depth: Maximum nesting depth rendered in the table of contents.
        section_filter_mode: Mode for section filtering ("include" or "exclude").
        sections: Section titles or anchors to include or exclude.
        languages: Keep only snippets in these languages; empty keeps all.
        use_cache: Whether remote documents may be served from the local cache.
    """

    include_toc: bool = True
    toc_depth: int = LANGREF_TOC_DEPTH
    section_filter_mode: Literal["include", "exclude"] = "exclude"
    sections: list[str] = field(default_factory=list)
    languages: list[str] = field(default_factory=list)
    use_cache: bool = True


async def build_index(
    source: str | Path,
    options: IndexOptions | None = None,
) -> tuple[IndexResult, dict[str, Any]]:
    """Load a reference document and render its index.

    Args:
        source: Local path or http(s) URL of the document.
        options: Processing options. Uses defaults if None.

    Returns:
        Tuple of (result, metadata).

    Raises:
        LoadError: If the document cannot be read or fetched.
        ParseError: If the document is structurally malformed.
    """
    opts = options or IndexOptions()
    text = await load_document(source, use_cache=opts.use_cache)
    return index_text(text, source=str(source), options=opts)


def index_text(
    text: str,
    *,
    source: str = "<text>",
    options: IndexOptions | None = None,
) -> tuple[IndexResult, dict[str, Any]]:
    """Synchronous variant of ``build_index`` for text already in memory."""
    opts = options or IndexOptions()
    document = parse(text)
    selected = apply_filters(document, opts)

    result = format_document(
        selected,
        source=source,
        include_toc=opts.include_toc,
        toc_depth=opts.toc_depth,
    )

    # Links resolve against the unfiltered document.
    broken = find_broken_links(document)
    metadata: dict[str, Any] = {
        "title": document.title,
        "source": source,
        "anchors": selected.anchors,
        "languages": selected.languages,
        "broken_links": [link.target for link in broken],
    }
    logger.info(
        "Indexed document",
        extra={
            "source": source,
            "sections": len(metadata["anchors"]),
            "snippets": selected.snippet_count,
            "broken_links": len(broken),
        },
    )
    return result, metadata


def apply_filters(document: Document, options: IndexOptions) -> Document:
    """Return a copy of ``document`` narrowed by the section and language filters."""
    sections = filter_sections(document.sections, mode=options.section_filter_mode, selected=options.sections)
    sections = filter_languages(sections, options.languages)
    preamble = filter_blocks(document.preamble, options.languages)
    return document.model_copy(update={"preamble": preamble, "sections": sections})
