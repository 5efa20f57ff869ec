"""Cache utilities for fetched documents."""

from __future__ import annotations

import asyncio
import hashlib
from datetime import datetime, timezone
from pathlib import Path


def is_cache_fresh(path: Path, ttl_seconds: int) -> bool:
    """Check if a cached file is still fresh based on its modification time.

    Args:
        path: Path to the cached file.
        ttl_seconds: Time-to-live in seconds. If <= 0, cache is considered
            fresh indefinitely (cache forever mode).

    Returns:
        True if the cache is fresh and usable, False otherwise.
    """
    if not path.exists():
        return False
    if ttl_seconds <= 0:
        return True
    mtime = datetime.fromtimestamp(path.stat().st_mtime, tz=timezone.utc)
    age_seconds = (datetime.now(timezone.utc) - mtime).total_seconds()
    return age_seconds <= ttl_seconds


def cache_dir_for(url: str, base_path: Path) -> Path:
    """Get the cache directory for a remote document.

    URLs are keyed by their SHA-256 so any URL maps to a safe directory name.
    """
    key = hashlib.sha256(url.strip().encode("utf-8")).hexdigest()
    return base_path / key


async def read_bytes_async(path: Path) -> bytes:
    return await asyncio.to_thread(path.read_bytes)


async def write_bytes_async(path: Path, content: bytes) -> None:
    await asyncio.to_thread(path.write_bytes, content)


async def mkdir_async(path: Path, parents: bool = False, exist_ok: bool = False) -> None:
    """Create a directory asynchronously using a thread pool."""
    await asyncio.to_thread(path.mkdir, parents=parents, exist_ok=exist_ok)
