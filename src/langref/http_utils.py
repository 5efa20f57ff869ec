"""HTTP utilities for fetching documents with retry logic and connection pooling."""

from __future__ import annotations

import asyncio
import logging
from typing import Final

import httpx

from langref.config import (
    LANGREF_FETCH_BACKOFF_S,
    LANGREF_FETCH_MAX_RETRIES,
    LANGREF_FETCH_TIMEOUT_S,
    LANGREF_USER_AGENT,
)
from langref.exceptions import LoadError

logger = logging.getLogger(__name__)

RETRY_STATUS_CODES: Final[frozenset[int]] = frozenset({429, 500, 502, 503, 504})

_MAX_REDIRECTS: Final[int] = 5


async def fetch_with_retries(
    url: str,
    *,
    client: httpx.AsyncClient | None = None,
    on_404: type[Exception] | None = None,
    on_404_message: str | None = None,
) -> bytes:
    """Fetch raw content from a URL, retrying transient failures.

    Args:
        url: The URL to fetch.
        client: Optional httpx.AsyncClient for connection pooling. If not
            provided, a new client is created for this request.
        on_404: Custom exception class to raise on 404. Defaults to LoadError.
        on_404_message: Custom error message for 404 responses.

    Returns:
        The response body as bytes; decoding is left to the caller.

    Raises:
        LoadError (or custom on_404 exception): If the fetch fails after all
            retries or returns 404.
    """
    timeout = httpx.Timeout(LANGREF_FETCH_TIMEOUT_S)
    headers = {"User-Agent": LANGREF_USER_AGENT}
    last_exc: Exception | None = None
    not_found_exc_class = on_404 or LoadError

    async def do_fetch(http_client: httpx.AsyncClient) -> bytes:
        nonlocal last_exc

        for attempt in range(LANGREF_FETCH_MAX_RETRIES + 1):
            try:
                response = await http_client.get(url)

                if response.status_code == 404:
                    message = on_404_message or f"Resource not found at {url}"
                    raise not_found_exc_class(message)

                # Other client errors will not change on retry.
                if 400 <= response.status_code < 500 and response.status_code not in RETRY_STATUS_CODES:
                    raise LoadError(f"HTTP {response.status_code} from {url}")

                if response.status_code in RETRY_STATUS_CODES:
                    last_exc = LoadError(f"HTTP {response.status_code} from {url}")
                else:
                    response.raise_for_status()
                    return response.content
            except (httpx.RequestError, httpx.HTTPStatusError) as exc:
                last_exc = exc

            if attempt < LANGREF_FETCH_MAX_RETRIES:
                backoff = LANGREF_FETCH_BACKOFF_S * (2**attempt)
                logger.debug("Retrying fetch", extra={"url": url, "attempt": attempt + 1, "backoff_s": backoff})
                await asyncio.sleep(backoff)

        raise LoadError(f"Failed to fetch {url}: {last_exc}")

    if client is not None:
        return await do_fetch(client)

    async with httpx.AsyncClient(
        timeout=timeout,
        headers=headers,
        follow_redirects=True,
        max_redirects=_MAX_REDIRECTS,
    ) as new_client:
        return await do_fetch(new_client)
