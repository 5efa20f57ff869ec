"""Load reference documents from disk or over HTTP."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from langref.cache_utils import (
    cache_dir_for,
    is_cache_fresh,
    mkdir_async,
    read_bytes_async,
    write_bytes_async,
)
from langref.config import LANGREF_CACHE_PATH, LANGREF_CACHE_TTL_SECONDS
from langref.exceptions import LoadError, SourceNotFoundError
from langref.http_utils import fetch_with_retries

logger = logging.getLogger(__name__)

_REMOTE_SCHEMES = ("http://", "https://")
_CACHE_FILENAME = "source.md"


def is_remote(source: str) -> bool:
    return source.strip().lower().startswith(_REMOTE_SCHEMES)


def decode_document(raw: bytes, *, source: str) -> str:
    """Decode UTF-8 bytes, dropping a leading BOM."""
    try:
        return raw.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise LoadError(f"{source} is not valid UTF-8: {exc}") from exc


def read_document(path: str | Path) -> str:
    """Read a local UTF-8 document.

    Raises:
        SourceNotFoundError: The path does not exist or is not a file.
        LoadError: The file cannot be read or is not UTF-8.
    """
    path = Path(path).expanduser()
    if not path.is_file():
        raise SourceNotFoundError(f"Document not found: {path}")
    try:
        raw = path.read_bytes()
    except OSError as exc:
        raise LoadError(f"Cannot read {path}: {exc}") from exc
    return decode_document(raw, source=str(path))


async def fetch_document(url: str, *, use_cache: bool = True) -> str:
    """Fetch a remote document and cache it locally.

    Raises:
        SourceNotFoundError: The server answered 404.
        LoadError: A network error persisted through all retries.
    """
    cache_dir = cache_dir_for(url, LANGREF_CACHE_PATH)
    cached_path = cache_dir / _CACHE_FILENAME

    if use_cache and is_cache_fresh(cached_path, LANGREF_CACHE_TTL_SECONDS):
        logger.debug("Using cached document", extra={"url": url, "path": str(cached_path)})
        return decode_document(await read_bytes_async(cached_path), source=url)

    raw = await fetch_with_retries(
        url,
        on_404=SourceNotFoundError,
        on_404_message=f"Document not found at {url}",
    )
    text = decode_document(raw, source=url)
    if use_cache:
        await mkdir_async(cache_dir, parents=True, exist_ok=True)
        await write_bytes_async(cached_path, raw)
    logger.info("Fetched document", extra={"url": url, "bytes": len(raw)})
    return text


async def load_document(source: str | Path, *, use_cache: bool = True) -> str:
    """Load from a URL or a local path, whichever ``source`` names."""
    if isinstance(source, str) and is_remote(source):
        return await fetch_document(source.strip(), use_cache=use_cache)
    return await asyncio.to_thread(read_document, source)
