"""Index output models."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel


class IndexResult(BaseModel):
    """Final rendered output for one document."""

    summary: str
    sections_tree: str
    toc: str
    content: str


class SearchHit(BaseModel):
    """A keyword match inside a document.

    ``anchor`` and ``title`` are None for matches in the preamble.
    """

    anchor: str | None = None
    title: str | None = None
    location: Literal["title", "prose", "snippet"]
    line: int
    excerpt: str


class BrokenLink(BaseModel):
    """An in-document link whose target anchor does not exist."""

    target: str
    line: int
    section_anchor: str | None = None
