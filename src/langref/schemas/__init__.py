"""Shared schemas for langref."""

from langref.schemas.ingestion import BrokenLink, IndexResult, SearchHit
from langref.schemas.sections import Block, Document, Prose, Section, Snippet

__all__ = [
    "Block",
    "BrokenLink",
    "Document",
    "IndexResult",
    "Prose",
    "SearchHit",
    "Section",
    "Snippet",
]
