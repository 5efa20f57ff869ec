"""Index endpoint for the API."""

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from server.models import IndexErrorResponse, IndexRequest, IndexSuccessResponse
from server.query_processor import process_query

router = APIRouter()

COMMON_INDEX_RESPONSES: dict[int | str, dict] = {
    status.HTTP_200_OK: {"model": IndexSuccessResponse, "description": "Document indexed"},
    status.HTTP_400_BAD_REQUEST: {"model": IndexErrorResponse, "description": "Document could not be loaded or parsed"},
}


@router.post("/api/index", responses=COMMON_INDEX_RESPONSES)
async def api_index(index_request: IndexRequest) -> JSONResponse:
    """Index a reference document and return its TOC and rendered content.

    **Parameters**

    - **index_request** (`IndexRequest`): inline ``text`` or a remote ``source`` plus filter options

    **Returns**

    - **JSONResponse**: the index on success, or ``{"error": ...}`` with status 400 when the
      document is missing or malformed (unterminated code fence, duplicate anchor)

    """
    response = await process_query(index_request)
    if isinstance(response, IndexErrorResponse):
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=response.model_dump())
    return JSONResponse(content=response.model_dump())
