"""Source caches for the compilation driver.

Several compilations may load the same schema or query file (one per
generated module in a larger build). A ``SourceCache`` keeps loaded schema
text and parsed query documents keyed by resolved path; each map has its own
lock so that compilations running in different threads share it safely.
``NoopCache`` reloads every time.
"""

import logging
import threading
from pathlib import Path
from typing import Callable, Protocol, TypeVar, runtime_checkable

from graphql import DocumentNode

from .errors import ConfigurationError
from .query import parse_query

logger = logging.getLogger(__name__)

T = TypeVar("T")


def read_file(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise ConfigurationError(
            f"Could not find file with path: {path}\n"
            "Hint: relative paths are resolved against the current working directory."
        ) from None
    except OSError as e:
        raise ConfigurationError(f"Could not read {path}: {e}") from e


def load_query(path: Path) -> tuple[str, DocumentNode]:
    text = read_file(path)
    return text, parse_query(text, str(path))


@runtime_checkable
class CompilationCache(Protocol):
    """Loads schema text and parsed query documents for the driver."""

    def schema_text(self, path: Path) -> str:
        ...

    def query_document(self, path: Path) -> tuple[str, DocumentNode]:
        ...


class SourceCache:
    """Path-keyed caches of schema text and parsed query documents."""

    def __init__(self):
        self._schemas: dict[Path, str] = {}
        self._queries: dict[Path, tuple[str, DocumentNode]] = {}
        self._schema_lock = threading.Lock()
        self._query_lock = threading.Lock()

    def schema_text(self, path: Path) -> str:
        return self._get(self._schemas, self._schema_lock, path, read_file)

    def query_document(self, path: Path) -> tuple[str, DocumentNode]:
        return self._get(self._queries, self._query_lock, path, load_query)

    def clear(self):
        with self._schema_lock:
            self._schemas.clear()
        with self._query_lock:
            self._queries.clear()

    @staticmethod
    def _get(
        entries: dict[Path, T],
        lock: threading.Lock,
        path: Path,
        loader: Callable[[Path], T],
    ) -> T:
        key = Path(path).resolve()
        with lock:
            if key not in entries:
                logger.debug("Loading %s", key)
                entries[key] = loader(key)
            return entries[key]


class NoopCache:
    """A cache that never caches."""

    def schema_text(self, path: Path) -> str:
        return read_file(Path(path))

    def query_document(self, path: Path) -> tuple[str, DocumentNode]:
        return load_query(Path(path))
