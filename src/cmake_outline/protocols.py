"""Collaborator protocols consumed by the symbol index."""

from collections.abc import Iterable
from dataclasses import dataclass
from typing import NewType, Protocol, runtime_checkable

from cmake_outline.syntax import SyntaxNode

# Project-relative posix path of a source file
FileId = NewType("FileId", str)


@dataclass(frozen=True, slots=True)
class Scope:
    """Set of files a query is evaluated over.

    An empty ``roots`` tuple covers the whole project. Otherwise a file is in
    scope when it equals one of the roots or lives below one of them.
    """

    roots: tuple[str, ...] = ()

    @classmethod
    def all(cls) -> "Scope":
        """Scope covering every file of the project."""
        return cls()

    @classmethod
    def under(cls, *roots: str) -> "Scope":
        """Scope restricted to the given files or directories."""
        return cls(tuple(root.strip("/") for root in roots))

    def contains(self, file: FileId) -> bool:
        """Check whether a file belongs to this scope."""
        if not self.roots:
            return True
        return any(
            not root or file == root or file.startswith(f"{root}/")
            for root in self.roots
        )


@runtime_checkable
class FileEnumerator(Protocol):
    """Lists the CMake source files visible in a scope."""

    def enumerate_files(self, scope: Scope) -> Iterable[FileId]:
        """Enumerate files of the recognised kind in the scope.

        Args:
            scope: Scope to enumerate

        Returns:
            File identifiers, in no particular order

        """
        ...


@runtime_checkable
class TreeProvider(Protocol):
    """Resolves a file to its current parsed syntax tree."""

    def get_tree(self, file: FileId) -> SyntaxNode | None:
        """Get the current tree of a file.

        Implementations must return the same tree object for as long as the
        file content is unchanged, and a new tree once it changes.

        Args:
            file: File to resolve

        Returns:
            FILE root node, or None if the file cannot be read or parsed

        """
        ...
