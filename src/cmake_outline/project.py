"""Projects supplying CMake files and their syntax trees to the index."""

import hashlib
import logging
import threading
from collections.abc import Iterable
from pathlib import Path

import pathspec

from cmake_outline.cache import TreeCache
from cmake_outline.config import ProjectConfig
from cmake_outline.errors import ParserError
from cmake_outline.index import SymbolIndex
from cmake_outline.parser import CMakeParser
from cmake_outline.protocols import FileId, Scope
from cmake_outline.syntax import SyntaxNode

logger = logging.getLogger(__name__)


class InMemoryProject:
    """Project whose CMake sources are held in memory.

    Each ``add`` bumps the version of the file; trees are parsed lazily and
    reused until the file changes again.
    """

    def __init__(self, parser: CMakeParser | None = None) -> None:
        self._parser = parser or CMakeParser()
        self._sources: dict[FileId, tuple[int, str]] = {}
        self._cache = TreeCache()
        self._lock = threading.Lock()

    def add(self, file: str, source_code: str) -> FileId:
        """Add or replace the source of a file.

        Args:
            file: Project-relative path of the file
            source_code: CMake source text

        Returns:
            Identifier of the file

        """
        file_id = FileId(file)
        with self._lock:
            version = self._sources.get(file_id, (0, ""))[0] + 1
            self._sources[file_id] = (version, source_code)
        return file_id

    def remove(self, file: str) -> None:
        """Remove a file from the project."""
        file_id = FileId(file)
        with self._lock:
            self._sources.pop(file_id, None)
        self._cache.discard(file_id)

    def enumerate_files(self, scope: Scope) -> Iterable[FileId]:
        """Enumerate the files of the project in the scope."""
        with self._lock:
            files = list(self._sources)
        return [file for file in files if scope.contains(file)]

    def get_tree(self, file: FileId) -> SyntaxNode | None:
        """Get the tree of the current version of a file."""
        with self._lock:
            entry = self._sources.get(file)
        if entry is None:
            return None
        version, source_code = entry

        tree = self._cache.get(file, version)
        if tree is not None:
            return tree

        try:
            tree = self._parser.parse(source_code, Path(file).name)
        except ParserError as e:
            logger.warning(f"Skipping file {file}: {e}")
            self._cache.discard(file)
            return None
        self._cache.put(file, version, tree)
        return tree

    def index(self, max_workers: int = 1) -> SymbolIndex:
        """Create a symbol index over this project."""
        return SymbolIndex(self, self, max_workers=max_workers)


class FilesystemProject:
    """Project reading CMake sources from a directory.

    Files are selected with Git-style wildmatch patterns relative to the
    project root and versioned by a digest of their content, so a tree is
    reparsed exactly when the file content changes.
    """

    def __init__(
        self, config: ProjectConfig, parser: CMakeParser | None = None
    ) -> None:
        """Initialise the project with validated configuration.

        Args:
            config: Validated project configuration
            parser: Parser to use (a new CMakeParser by default)

        """
        self._config = config
        self._parser = parser or CMakeParser()
        self._cache = TreeCache()
        self._include_spec = pathspec.PathSpec.from_lines(
            "gitwildmatch", config.include_patterns
        )
        self._exclude_spec = pathspec.PathSpec.from_lines(
            "gitwildmatch", config.exclude_patterns
        )

    @property
    def root(self) -> Path:
        """Project root directory."""
        return self._config.root

    def enumerate_files(self, scope: Scope) -> Iterable[FileId]:
        """Enumerate CMake files below the root that belong to the scope.

        Args:
            scope: Scope to enumerate

        Returns:
            Sorted project-relative file identifiers

        """
        files: list[FileId] = []
        for file_path in sorted(self._config.root.rglob("*")):
            if not file_path.is_file():
                continue

            file_id = FileId(file_path.relative_to(self._config.root).as_posix())
            if not self._should_include(file_id) or not scope.contains(file_id):
                continue

            if len(files) >= self._config.max_files:
                logger.warning(
                    f"File limit of {self._config.max_files} reached, "
                    f"ignoring remaining files under {self._config.root}"
                )
                break
            files.append(file_id)

        logger.debug(f"Found {len(files)} CMake files under {self._config.root}")
        return files

    def get_tree(self, file: FileId) -> SyntaxNode | None:
        """Get the tree of the current content of a file.

        Returns:
            FILE root node, or None if the file is missing, too large,
            undecodable or unparsable

        """
        file_path = self._config.root / file
        try:
            size = file_path.stat().st_size
            if size > self._config.max_file_size:
                logger.warning(f"Skipping large file: {file} ({size} bytes)")
                self._cache.discard(file)
                return None
            content = file_path.read_bytes()
        except OSError as e:
            logger.warning(f"Skipping file {file}: {e}")
            self._cache.discard(file)
            return None

        version = hashlib.sha256(content).hexdigest()
        tree = self._cache.get(file, version)
        if tree is not None:
            return tree

        try:
            source_code = content.decode(self._config.encoding, self._config.errors)
            tree = self._parser.parse(source_code, file_path.name)
        except (UnicodeDecodeError, ParserError) as e:
            logger.warning(f"Skipping file {file}: {e}")
            self._cache.discard(file)
            return None

        logger.debug(f"Parsed {file}")
        self._cache.put(file, version, tree)
        return tree

    def index(self) -> SymbolIndex:
        """Create a symbol index over this project."""
        return SymbolIndex(self, self, max_workers=self._config.max_workers)

    def _should_include(self, file: FileId) -> bool:
        if not self._include_spec.match_file(file):
            return False
        return not self._exclude_spec.match_file(file)
