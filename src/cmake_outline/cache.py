"""Per-file syntax tree cache keyed by content version."""

import threading
from collections.abc import Hashable

from cmake_outline.protocols import FileId
from cmake_outline.syntax import SyntaxNode


class TreeCache:
    """Holds the most recent tree of each file.

    Only one version per file is kept: storing a tree for a new version
    evicts the previous one, and a lookup for any other version misses.
    """

    def __init__(self) -> None:
        self._entries: dict[FileId, tuple[Hashable, SyntaxNode]] = {}
        self._lock = threading.Lock()

    def get(self, file: FileId, version: Hashable) -> SyntaxNode | None:
        """Return the cached tree of a file if it was built from this version."""
        with self._lock:
            entry = self._entries.get(file)
        if entry is None or entry[0] != version:
            return None
        return entry[1]

    def put(self, file: FileId, version: Hashable, tree: SyntaxNode) -> None:
        """Store the tree built from a version of a file."""
        with self._lock:
            self._entries[file] = (version, tree)

    def discard(self, file: FileId) -> None:
        """Forget any tree of a file."""
        with self._lock:
            self._entries.pop(file, None)

    def clear(self) -> None:
        """Forget all trees."""
        with self._lock:
            self._entries.clear()

    def __contains__(self, file: object) -> bool:
        with self._lock:
            return file in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
