"""Process an index request and build the API response."""

from __future__ import annotations

from typing import cast

from langref.config import LANGREF_MAX_DISPLAY_SIZE
from langref.exceptions import LangrefError
from langref.ingestion import IndexOptions, build_index, index_text
from langref.utils.logging_config import get_logger
from server.models import IndexErrorResponse, IndexRequest, IndexResponse, IndexSuccessResponse

logger = get_logger(__name__)

_INLINE_SOURCE = "<text>"


async def process_query(request: IndexRequest) -> IndexResponse:
    """Index the requested document and return the rendered output."""
    options = IndexOptions(
        include_toc=request.include_toc,
        toc_depth=request.toc_depth,
        section_filter_mode=request.section_filter_mode.value,
        sections=request.sections,
        languages=request.languages,
        use_cache=request.use_cache,
    )
    source = request.source or _INLINE_SOURCE

    try:
        if request.source is not None:
            result, metadata = await build_index(request.source, options)
        else:
            result, metadata = index_text(cast(str, request.text), source=_INLINE_SOURCE, options=options)
    except LangrefError as exc:
        logger.warning("Index request failed", extra={"source": source, "error": str(exc)})
        return IndexErrorResponse(error=str(exc))

    content = result.content
    if len(content) > LANGREF_MAX_DISPLAY_SIZE:
        content = (
            f"(Content cropped to {int(LANGREF_MAX_DISPLAY_SIZE / 1_000)}k characters)\n"
            + content[:LANGREF_MAX_DISPLAY_SIZE]
        )

    logger.info("Index request completed", extra={"source": source, "sections": len(metadata["anchors"])})

    return IndexSuccessResponse(
        title=metadata["title"],
        source=source,
        summary=result.summary,
        toc=result.toc,
        tree=result.sections_tree,
        content=content,
        anchors=metadata["anchors"],
        languages=metadata["languages"],
        broken_links=metadata["broken_links"],
    )
