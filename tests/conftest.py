"""Test setup for langref."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Iterator

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


@pytest.fixture(autouse=True)
def _reset_logging() -> Iterator[None]:
    """Undo handlers installed by the CLI so they never outlive a captured stream."""
    yield
    for name in ("langref", "server"):
        logger = logging.getLogger(name)
        logger.handlers = []
        logger.propagate = True
        logger.setLevel(logging.NOTSET)


SAMPLE_REFERENCE = """\
Quick reference for Swift, Go, and Java. Use ctrl+F to find a keyword.

# Language Reference

<h2 id="swift">Swift</h2>

<h3 id="swift-actors">Actors</h3>

Actors isolate mutable state. See also [Go concurrency](#go-concurrency).

```swift
actor Counter {
    var value = 0
}
```

<h2 id="go">Go</h2>

<h3 id="go-concurrency">Concurrency</h3>

```go
go worker(ch)
```

### Maps <a id="go-maps"></a>

~~~go
m := map[string]int{}
~~~

<h2 id="java">Java</h2>

### Generics

```java
List<String> names = new ArrayList<>();
```
"""


@pytest.fixture
def sample_text() -> str:
    """A small three-language reference document."""
    return SAMPLE_REFERENCE


@pytest.fixture
def sample_file(tmp_path: Path, sample_text: str) -> Path:
    """The sample document written to disk."""
    path = tmp_path / "reference.md"
    path.write_text(sample_text, encoding="utf-8")
    return path
