"""langref: index multi-language reference documents into navigable markdown."""

from langref.anchors import find_broken_links, slugify, validate_anchors
from langref.exceptions import (
    DuplicateAnchorError,
    LangrefError,
    LoadError,
    ParseError,
    RenderError,
    SourceNotFoundError,
    UnterminatedFenceError,
)
from langref.ingestion import IndexOptions, build_index, index_text
from langref.output_formatter import render_markdown, render_toc
from langref.parser import parse
from langref.schemas import Document, IndexResult, Prose, Section, Snippet
from langref.sections import search

__all__ = [
    "Document",
    "DuplicateAnchorError",
    "IndexOptions",
    "IndexResult",
    "LangrefError",
    "LoadError",
    "ParseError",
    "Prose",
    "RenderError",
    "Section",
    "Snippet",
    "SourceNotFoundError",
    "UnterminatedFenceError",
    "build_index",
    "find_broken_links",
    "index_text",
    "parse",
    "render_markdown",
    "render_toc",
    "search",
    "slugify",
    "validate_anchors",
]
