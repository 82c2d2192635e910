"""Project-wide index of function and macro definitions."""

import logging
import re
import threading
from collections.abc import Callable, Iterable
from concurrent.futures import ThreadPoolExecutor

from cmake_outline.errors import ScanCancelledError
from cmake_outline.matcher import Definition, file_definitions
from cmake_outline.protocols import FileEnumerator, FileId, Scope, TreeProvider
from cmake_outline.syntax import SyntaxNode

logger = logging.getLogger(__name__)


class SymbolIndex:
    """Queryable mapping from definition names to their occurrences.

    Files are enumerated and resolved to trees through the injected
    collaborators on every query. Each file's definitions are cached for as
    long as the tree provider keeps returning the same tree object, so a
    changed file is re-read as soon as the provider reports a new tree.
    Files without a tree are skipped; queries never fail because of a
    single file.
    """

    def __init__(
        self,
        enumerator: FileEnumerator,
        provider: TreeProvider,
        max_workers: int = 1,
    ) -> None:
        """Initialise the index.

        Args:
            enumerator: Lists the files of a scope
            provider: Resolves files to syntax trees
            max_workers: Number of threads used to scan files (1 = sequential)

        """
        if max_workers < 1:
            raise ValueError(f"max_workers must be at least 1, got {max_workers}")
        self._enumerator = enumerator
        self._provider = provider
        self._max_workers = max_workers
        self._cache: dict[FileId, tuple[SyntaxNode, tuple[Definition, ...]]] = {}
        self._lock = threading.Lock()

    def all_definitions(
        self, scope: Scope, cancel: threading.Event | None = None
    ) -> set[Definition]:
        """Collect every definition in a scope.

        Args:
            scope: Files to scan
            cancel: Event checked between files

        Returns:
            Union of the definitions of all readable files in scope

        Raises:
            ScanCancelledError: If cancel is set before the scan completes

        """
        return self._collect(scope, lambda _: True, cancel)

    def definitions_named(
        self,
        scope: Scope,
        pattern: str,
        cancel: threading.Event | None = None,
    ) -> set[Definition]:
        """Collect the definitions whose whole name matches a regular expression.

        Matching is case-sensitive. An invalid pattern matches nothing.

        Args:
            scope: Files to scan
            pattern: Regular expression matched against the entire name
            cancel: Event checked between files

        Returns:
            Matching definitions of all readable files in scope

        Raises:
            ScanCancelledError: If cancel is set before the scan completes

        """
        try:
            compiled = re.compile(pattern)
        except re.error as e:
            logger.warning(f"Invalid definition name pattern {pattern!r}: {e}")
            return set()

        return self._collect(
            scope,
            lambda definition: compiled.fullmatch(definition.name) is not None,
            cancel,
        )

    def definitions_in_file(self, file: FileId) -> list[Definition]:
        """Return the definitions of one file in source order."""
        return list(self._file_definitions(file))

    def invalidate(self, file: FileId | None = None) -> None:
        """Drop cached definitions for one file, or for all files."""
        with self._lock:
            if file is None:
                self._cache.clear()
            else:
                self._cache.pop(file, None)

    def _collect(
        self,
        scope: Scope,
        predicate: Callable[[Definition], bool],
        cancel: threading.Event | None,
    ) -> set[Definition]:
        files = [
            file
            for file in self._enumerator.enumerate_files(scope)
            if scope.contains(file)
        ]
        if not scope.roots:
            self._prune(files)
        result: set[Definition] = set()

        for definitions in self._scan(files, cancel):
            result.update(d for d in definitions if predicate(d))

        logger.info(f"Scanned {len(files)} files, {len(result)} definitions matched")
        return result

    def _prune(self, files: list[FileId]) -> None:
        # Only valid for an unscoped enumeration, which lists every live file
        live = set(files)
        with self._lock:
            stale = [file for file in self._cache if file not in live]
            for file in stale:
                del self._cache[file]
        if stale:
            logger.debug(f"Dropped cached definitions of {len(stale)} removed files")

    def _scan(
        self, files: list[FileId], cancel: threading.Event | None
    ) -> Iterable[tuple[Definition, ...]]:
        if self._max_workers == 1 or len(files) < 2:
            for file in files:
                _check_cancelled(cancel)
                yield self._file_definitions(file)
            return

        with ThreadPoolExecutor(max_workers=self._max_workers) as pool:

            def scan_file(file: FileId) -> tuple[Definition, ...]:
                _check_cancelled(cancel)
                return self._file_definitions(file)

            futures = [pool.submit(scan_file, file) for file in files]
            try:
                for future in futures:
                    yield future.result()
            finally:
                for future in futures:
                    future.cancel()

    def _file_definitions(self, file: FileId) -> tuple[Definition, ...]:
        try:
            tree = self._provider.get_tree(file)
        except Exception as e:
            logger.warning(f"Skipping file {file}: {e}")
            return ()

        if tree is None:
            logger.debug(f"No tree available for {file}, skipping")
            with self._lock:
                self._cache.pop(file, None)
            return ()

        with self._lock:
            cached = self._cache.get(file)
        if cached is not None and cached[0] is tree:
            return cached[1]

        definitions = tuple(file_definitions(tree, file))
        with self._lock:
            self._cache[file] = (tree, definitions)
        return definitions


def _check_cancelled(cancel: threading.Event | None) -> None:
    if cancel is not None and cancel.is_set():
        raise ScanCancelledError("Definition scan cancelled")
