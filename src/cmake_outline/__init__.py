"""Outline and definition index for CMake sources.

This package recognises function and macro definitions in CMake syntax
trees, builds per-file outlines from them and indexes them across a project
so they can be looked up by name.

Typical use: FilesystemProject → SymbolIndex → definitions_named(scope, name)
"""

from .config import ProjectConfig
from .errors import (
    CMakeOutlineError,
    ConfigurationError,
    InvalidNameError,
    ParserError,
    ScanCancelledError,
)
from .index import SymbolIndex
from .matcher import (
    Definition,
    DefinitionKind,
    Presentation,
    file_definitions,
    match_block,
    match_definition,
)
from .models import DefinitionModel, OutlineModel
from .outline import OutlineKind, OutlineNode, build_outline
from .parser import CMakeParser
from .project import FilesystemProject, InMemoryProject
from .protocols import FileEnumerator, FileId, Scope, TreeProvider
from .rename import get_name, get_name_identifier, set_name, validate_name
from .syntax import NodeKind, Span, SyntaxNode

__all__ = [
    "CMakeOutlineError",
    "CMakeParser",
    "ConfigurationError",
    "Definition",
    "DefinitionKind",
    "DefinitionModel",
    "FileEnumerator",
    "FileId",
    "FilesystemProject",
    "InMemoryProject",
    "InvalidNameError",
    "NodeKind",
    "OutlineKind",
    "OutlineModel",
    "OutlineNode",
    "ParserError",
    "Presentation",
    "ProjectConfig",
    "ScanCancelledError",
    "Scope",
    "Span",
    "SymbolIndex",
    "SyntaxNode",
    "TreeProvider",
    "build_outline",
    "file_definitions",
    "get_name",
    "get_name_identifier",
    "match_block",
    "match_definition",
    "set_name",
    "validate_name",
]
