"""Local configuration for langref."""

from __future__ import annotations

import os
from pathlib import Path


DEFAULT_CACHE_DIR = ".langref_cache"
DEFAULT_CACHE_TTL_SECONDS = 24 * 60 * 60
DEFAULT_FETCH_TIMEOUT_S = 10.0
DEFAULT_FETCH_MAX_RETRIES = 2
DEFAULT_FETCH_BACKOFF_S = 0.5
DEFAULT_USER_AGENT = "langref/0.1"
DEFAULT_TOC_DEPTH = 6
DEFAULT_MAX_DISPLAY_SIZE = 300_000

# Local-only cache directory for fetched remote documents.
LANGREF_CACHE_PATH = Path(os.getenv("LANGREF_CACHE_PATH", DEFAULT_CACHE_DIR)).expanduser().resolve()
LANGREF_CACHE_TTL_SECONDS = int(os.getenv("LANGREF_CACHE_TTL_SECONDS", str(DEFAULT_CACHE_TTL_SECONDS)))
LANGREF_FETCH_TIMEOUT_S = float(os.getenv("LANGREF_FETCH_TIMEOUT_S", str(DEFAULT_FETCH_TIMEOUT_S)))
LANGREF_FETCH_MAX_RETRIES = int(os.getenv("LANGREF_FETCH_MAX_RETRIES", str(DEFAULT_FETCH_MAX_RETRIES)))
LANGREF_FETCH_BACKOFF_S = float(os.getenv("LANGREF_FETCH_BACKOFF_S", str(DEFAULT_FETCH_BACKOFF_S)))
LANGREF_USER_AGENT = os.getenv("LANGREF_USER_AGENT", DEFAULT_USER_AGENT)
LANGREF_TOC_DEPTH = int(os.getenv("LANGREF_TOC_DEPTH", str(DEFAULT_TOC_DEPTH)))
LANGREF_LOG_LEVEL = os.getenv("LANGREF_LOG_LEVEL", "INFO")
LANGREF_MAX_DISPLAY_SIZE = int(os.getenv("LANGREF_MAX_DISPLAY_SIZE", str(DEFAULT_MAX_DISPLAY_SIZE)))
