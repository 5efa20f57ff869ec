"""Format a parsed document into summary, tree, TOC, and content outputs."""

from __future__ import annotations

import html
from typing import Iterable, Sequence

from langref.config import LANGREF_TOC_DEPTH
from langref.exceptions import RenderError
from langref.schemas import Block, Document, IndexResult, Prose, Section, Snippet

OUTPUT_FORMATS = ("markdown", "toc", "tree", "json")
_CONTENTS_LABEL = "**Contents**"


def format_document(
    document: Document,
    *,
    source: str | None,
    include_toc: bool = True,
    toc_depth: int = LANGREF_TOC_DEPTH,
) -> IndexResult:
    """Create summary, section tree, TOC, and content."""
    tree = render_sections_tree(document.sections)
    toc = render_toc(document.sections, max_depth=toc_depth)
    content = render_markdown(document, include_toc=include_toc, toc_depth=toc_depth)

    summary_lines = []
    if document.title:
        summary_lines.append(f"Title: {document.title}")
    if source:
        summary_lines.append(f"Source: {source}")
    summary_lines.append(f"Sections: {count_sections(document.sections)}")
    summary_lines.append(f"Snippets: {document.snippet_count}")
    languages = document.languages
    if languages:
        breakdown = ", ".join(f"{name} ({count})" for name, count in languages.items())
        summary_lines.append(f"Languages: {breakdown}")

    return IndexResult(summary="\n".join(summary_lines), sections_tree=tree, toc=toc, content=content)


def render(document: Document, output_format: str, *, include_toc: bool = True, toc_depth: int = LANGREF_TOC_DEPTH) -> str:
    """Render ``document`` in one of ``OUTPUT_FORMATS``."""
    if output_format == "markdown":
        return render_markdown(document, include_toc=include_toc, toc_depth=toc_depth)
    if output_format == "toc":
        return render_toc(document.sections, max_depth=toc_depth)
    if output_format == "tree":
        return render_sections_tree(document.sections)
    if output_format == "json":
        return render_json(document)
    raise RenderError(f"Unknown output format {output_format!r}; expected one of {', '.join(OUTPUT_FORMATS)}")


def count_sections(sections: Iterable[Section]) -> int:
    """Count total sections in the tree."""
    total = 0
    for section in sections:
        total += 1
        total += count_sections(section.children)
    return total


def render_toc(sections: Sequence[Section], max_depth: int = LANGREF_TOC_DEPTH, indent: int = 0) -> str:
    """Render a nested markdown list linking every heading to its anchor."""
    if indent >= max_depth:
        return ""
    lines: list[str] = []
    for section in sections:
        lines.append("  " * indent + f"- [{_escape_label(section.title)}](#{section.anchor})")
        if section.children:
            nested = render_toc(section.children, max_depth, indent + 1)
            if nested:
                lines.append(nested)
    return "\n".join(lines)


def render_markdown(document: Document, *, include_toc: bool = True, toc_depth: int = LANGREF_TOC_DEPTH) -> str:
    """Serialize the document back to markdown.

    Headings are always written as ``<hN id="anchor">`` so every anchor survives
    a re-parse, whether it was explicit in the source or generated.
    """
    blocks: list[str] = [_render_block(block) for block in document.preamble]
    if include_toc:
        toc = render_toc(document.sections, max_depth=toc_depth)
        if toc:
            blocks.append(_CONTENTS_LABEL + "\n\n" + toc)

    for section in document.sections:
        blocks.extend(_render_section(section))

    # Leading spaces on the first line are significant (indented prose is not a heading).
    content = "\n\n".join(block for block in blocks if block).strip("\n")
    return content + "\n" if content else ""


def render_sections_tree(sections: Sequence[Section], indent: int = 0) -> str:
    lines: list[str] = ["Sections:"] if indent == 0 else []
    for section in sections:
        lines.append(" " * ((indent + 1) * 4) + f"{section.title} (#{section.anchor})")
        if section.children:
            lines.append(render_sections_tree(section.children, indent + 1))
    return "\n".join(lines)


def render_json(document: Document) -> str:
    return document.model_dump_json(indent=2)


def _render_section(section: Section) -> list[str]:
    blocks: list[str] = [_render_heading(section)]
    blocks.extend(_render_block(block) for block in section.blocks)
    for child in section.children:
        blocks.extend(_render_section(child))
    return blocks


def _render_heading(section: Section) -> str:
    anchor = html.escape(section.anchor, quote=True)
    title = html.escape(section.title, quote=False)
    return f'<h{section.level} id="{anchor}">{title}</h{section.level}>'


def _render_block(block: Block) -> str:
    if isinstance(block, Snippet):
        fence = _safe_fence(block)
        info = block.language or ""
        if block.code:
            return f"{fence}{info}\n{block.code}\n{fence}"
        return f"{fence}{info}\n{fence}"
    if isinstance(block, Prose):
        return block.text
    raise RenderError(f"Unsupported block type: {type(block).__name__}")


def _safe_fence(snippet: Snippet) -> str:
    """Lengthen the original fence if the code itself contains a closing run."""
    fence = snippet.fence
    char = fence[0]
    longest = 0
    for line in snippet.code.split("\n"):
        stripped = line.strip()
        if stripped and set(stripped) == {char}:
            longest = max(longest, len(stripped))
    if longest >= len(fence):
        return char * (longest + 1)
    return fence


def _escape_label(title: str) -> str:
    return title.replace("\\", "\\\\").replace("[", "\\[").replace("]", "\\]")
