"""Pydantic models for the index API."""

from __future__ import annotations

from enum import Enum
from typing import Union

from pydantic import BaseModel, Field, field_validator, model_validator

from langref.config import LANGREF_TOC_DEPTH
from langref.loader import is_remote


class SectionFilterMode(str, Enum):
    """Enumeration for section filtering modes."""

    INCLUDE = "include"
    EXCLUDE = "exclude"


class IndexRequest(BaseModel):
    """Request model for the /api/index endpoint.

    Attributes
    ----------
    text : str | None
        Markdown document to index, sent inline.
    source : str | None
        http(s) URL of the document to fetch. Exactly one of ``text`` and
        ``source`` must be given; local paths are not accepted over HTTP.
    include_toc : bool
        Prepend the table of contents to the rendered content.
    toc_depth : int
        Maximum nesting depth of the table of contents.
    section_filter_mode : SectionFilterMode
        Section filtering mode (include or exclude).
    sections : list[str]
        Section titles or anchors to include or exclude.
    languages : list[str]
        Snippet languages to keep; empty keeps every snippet.
    use_cache : bool
        Allow serving a remote document from the local cache.

    """

    text: str | None = Field(default=None, description="Inline markdown document")
    source: str | None = Field(default=None, description="http(s) URL of the document")
    include_toc: bool = Field(default=True, description="Include table of contents in content")
    toc_depth: int = Field(default=LANGREF_TOC_DEPTH, ge=1, le=6, description="Table of contents depth")
    section_filter_mode: SectionFilterMode = Field(
        default=SectionFilterMode.EXCLUDE,
        description="Section filtering mode",
    )
    sections: list[str] = Field(default_factory=list, description="Section titles or anchors to filter")
    languages: list[str] = Field(default_factory=list, description="Snippet languages to keep")
    use_cache: bool = Field(default=True, description="Use the local cache for remote documents")

    @field_validator("sections", "languages", mode="before")
    @classmethod
    def normalize_list(cls, v: str | list[str] | None) -> list[str]:
        """Normalize inputs from comma-separated strings or lists."""
        if not v:
            return []
        if isinstance(v, str):
            return [item.strip() for item in v.split(",") if item.strip()]
        return [item.strip() for item in v if item.strip()]

    @field_validator("source")
    @classmethod
    def validate_source(cls, v: str | None) -> str | None:
        """Only remote URLs may be fetched through the API."""
        if v is None:
            return None
        v = v.strip()
        if not is_remote(v):
            err = "source must be an http(s) URL"
            raise ValueError(err)
        return v

    @model_validator(mode="after")
    def check_exactly_one_input(self) -> IndexRequest:
        if (self.text is None) == (self.source is None):
            err = "provide exactly one of text or source"
            raise ValueError(err)
        return self


class IndexSuccessResponse(BaseModel):
    """Success response model for the /api/index endpoint."""

    title: str | None = Field(default=None, description="Document title")
    source: str = Field(..., description="Where the document came from")
    summary: str = Field(..., description="Index summary")
    toc: str = Field(..., description="Table of contents")
    tree: str = Field(..., description="Section tree structure")
    content: str = Field(..., description="Rendered markdown content")
    anchors: list[str] = Field(default_factory=list, description="Anchors in document order")
    languages: dict[str, int] = Field(default_factory=dict, description="Snippet count per language")
    broken_links: list[str] = Field(default_factory=list, description="Link targets with no matching anchor")


class IndexErrorResponse(BaseModel):
    """Error response model for the /api/index endpoint."""

    error: str = Field(..., description="Error message")


IndexResponse = Union[IndexSuccessResponse, IndexErrorResponse]
