"""Section filtering, snippet selection, and keyword search."""

from __future__ import annotations

import re
from typing import Iterable, Sequence

from langref.schemas import Block, Document, Prose, SearchHit, Section, Snippet

_EXCERPT_WIDTH = 80


def normalize_section_title(title: str) -> str:
    """Normalize section titles for comparison."""
    title = title.strip().lower()
    title = re.sub(r"^[\d.]+\s+", "", title)
    return re.sub(r"\s+", " ", title)


def filter_sections(
    sections: Sequence[Section],
    *,
    mode: str = "exclude",
    selected: Iterable[str] | None = None,
) -> tuple[Section, ...]:
    """Filter sections by title or anchor using include or exclude mode."""
    if mode not in ("include", "exclude"):
        raise ValueError(f"Unknown section filter mode: {mode!r}")
    selected_titles = {normalize_section_title(title) for title in (selected or []) if title.strip()}
    if not selected_titles:
        return tuple(sections)

    def _matches(node: Section) -> bool:
        return normalize_section_title(node.title) in selected_titles or node.anchor.lower() in selected_titles

    def _filter(nodes: Sequence[Section]) -> tuple[Section, ...]:
        result: list[Section] = []
        for node in nodes:
            in_selected = _matches(node)
            if mode == "include":
                if in_selected:
                    result.append(node)
                else:
                    children = _filter(node.children)
                    if children:
                        result.append(node.model_copy(update={"children": children}))
            else:
                if in_selected:
                    continue
                result.append(node.model_copy(update={"children": _filter(node.children)}))
        return tuple(result)

    return _filter(sections)


def filter_languages(sections: Sequence[Section], languages: Iterable[str] | None) -> tuple[Section, ...]:
    """Keep only snippets tagged with one of ``languages`` (case-insensitive)."""
    wanted = {language.strip().casefold() for language in (languages or []) if language.strip()}
    if not wanted:
        return tuple(sections)

    def _filter(nodes: Sequence[Section]) -> tuple[Section, ...]:
        return tuple(
            node.model_copy(
                update={
                    "blocks": filter_blocks(node.blocks, wanted),
                    "children": _filter(node.children),
                }
            )
            for node in nodes
        )

    return _filter(sections)


def filter_blocks(blocks: Sequence[Block], languages: Iterable[str] | None) -> tuple[Block, ...]:
    """Drop snippets whose language is not in ``languages``; prose is always kept."""
    wanted = {language.strip().casefold() for language in (languages or []) if language.strip()}
    if not wanted:
        return tuple(blocks)
    return tuple(
        block
        for block in blocks
        if not isinstance(block, Snippet) or (block.language is not None and block.language.casefold() in wanted)
    )


def search(document: Document, keyword: str, *, case_sensitive: bool = False) -> list[SearchHit]:
    """Find ``keyword`` in the preamble, titles, prose, and snippet code, in document order."""
    if not keyword:
        return []
    flags = 0 if case_sensitive else re.IGNORECASE
    pattern = re.compile(re.escape(keyword), flags)

    hits = _search_blocks(document.preamble, pattern, anchor=None, title=None)
    for section in document.iter_sections():
        if pattern.search(section.title):
            hits.append(
                SearchHit(
                    anchor=section.anchor,
                    title=section.title,
                    location="title",
                    line=section.line,
                    excerpt=section.title,
                )
            )
        hits.extend(_search_blocks(section.blocks, pattern, anchor=section.anchor, title=section.title))
    return hits


def _search_blocks(
    blocks: Sequence[Block],
    pattern: re.Pattern[str],
    *,
    anchor: str | None,
    title: str | None,
) -> list[SearchHit]:
    hits: list[SearchHit] = []
    for block in blocks:
        if isinstance(block, Snippet):
            text, location, first_line = block.code, "snippet", block.line + 1
        elif isinstance(block, Prose):
            text, location, first_line = block.text, "prose", block.line
        else:
            continue
        for offset, line in enumerate(text.split("\n")):
            if pattern.search(line):
                hits.append(
                    SearchHit(
                        anchor=anchor,
                        title=title,
                        location=location,
                        line=first_line + offset,
                        excerpt=_excerpt(line),
                    )
                )
    return hits


def _excerpt(line: str) -> str:
    line = line.strip()
    if len(line) <= _EXCERPT_WIDTH:
        return line
    return line[: _EXCERPT_WIDTH - 3] + "..."
