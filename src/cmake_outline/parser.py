"""CMake source parser using tree-sitter."""

import logging
from collections.abc import Callable, Sequence
from pathlib import Path

import tree_sitter_cmake
from tree_sitter import Language, Node, Parser

from cmake_outline.errors import ParserError
from cmake_outline.syntax import (
    DEFAULT_FILE_NAME,
    Draft,
    NodeKind,
    SyntaxNode,
    branch,
    build,
    leaf,
)

logger = logging.getLogger(__name__)

# Constants
_DEFAULT_ENCODING = "utf-8"
_CMAKE_FILE_NAMES = frozenset({"cmakelists.txt"})
_CMAKE_EXTENSIONS = [".cmake"]

# tree-sitter-cmake node types
_COMMENT_TYPES = frozenset({"line_comment", "bracket_comment"})
_ERROR_TYPE = "ERROR"
_ARGUMENT_LIST_TYPE = "argument_list"
_BODY_TYPE = "body"
_NORMAL_COMMAND_TYPE = "normal_command"
_COMMAND_SUFFIX = "_command"
_END_COMMAND_PREFIX = "end"


def _get_tree_sitter_language() -> Language:
    """Get the tree-sitter CMake language binding."""
    return Language(tree_sitter_cmake.language())


class CMakeParser:
    """Parser turning CMake source text into a SyntaxNode tree.

    Parsing is delegated to tree-sitter-cmake; the concrete tree is then
    reshaped into the closed node kinds of ``cmake_outline.syntax``.
    """

    def __init__(self) -> None:
        """Initialise the parser.

        Raises:
            ParserError: If the tree-sitter CMake grammar cannot be loaded

        """
        try:
            self.parser = Parser()
            self.parser.language = _get_tree_sitter_language()
        except Exception as e:
            raise ParserError(f"Failed to load tree-sitter CMake grammar: {e}") from e

    def parse(self, source_code: str, name: str = DEFAULT_FILE_NAME) -> SyntaxNode:
        """Parse source code string.

        Args:
            source_code: CMake source to parse
            name: Display name of the file

        Returns:
            FILE root node whose text is the complete source

        Raises:
            ParserError: If the source cannot be parsed

        """
        try:
            source_bytes = source_code.encode(_DEFAULT_ENCODING)
            tree = self.parser.parse(source_bytes)
        except Exception as e:
            raise ParserError(f"Failed to parse {name}: {e}") from e

        if tree.root_node.has_error:
            logger.debug(f"Syntax errors in {name}, keeping partial tree")

        draft = _TreeConverter(source_bytes).convert(tree.root_node, name)
        return build(draft)

    @staticmethod
    def is_supported_file(file_path: Path) -> bool:
        """Check if a file is a CMake source.

        Args:
            file_path: Path to check

        Returns:
            True for CMakeLists.txt and files with a .cmake extension

        """
        return (
            file_path.name.lower() in _CMAKE_FILE_NAMES
            or file_path.suffix.lower() in _CMAKE_EXTENSIONS
        )


class _TreeConverter:
    """Reshapes a tree-sitter CMake tree into drafts.

    Every byte of the source ends up in exactly one leaf: text between
    tree-sitter nodes becomes whitespace leaves (or error leaves if it is not
    blank), so the text of each built node equals its source slice.
    """

    def __init__(self, source_bytes: bytes) -> None:
        self._source = source_bytes

    def convert(self, root: Node, name: str) -> Draft:
        elements = self._fill(
            root.children,
            0,
            len(self._source),
            lambda node: branch(NodeKind.FILE_ELEMENT, self._statement(node)),
        )
        return branch(NodeKind.FILE, *elements, name=name)

    def _statement(self, node: Node) -> Draft:
        if node.type == _ERROR_TYPE:
            return leaf(NodeKind.ERROR, self._text(node.start_byte, node.end_byte))
        if node.type in _COMMENT_TYPES:
            return leaf(NodeKind.COMMENT, self._text(node.start_byte, node.end_byte))
        if _is_command(node):
            return self._command(node)
        if _is_block(node):
            return self._block(node)
        return leaf(NodeKind.ERROR, self._text(node.start_byte, node.end_byte))

    def _block(self, node: Node) -> Draft:
        children = _present(node.children)
        head = children[0]
        end = children[-1] if len(children) > 1 else None
        if end is not None and not (
            _is_command(end) and end.type.startswith(_END_COMMAND_PREFIX)
        ):
            end = None

        inner = children[1:-1] if end is not None else children[1:]
        body_nodes = _flatten_body(inner)
        body_end = end.start_byte if end is not None else node.end_byte
        parts = [
            branch(NodeKind.COMPOUND_EXPR, self._command(head)),
            branch(
                NodeKind.BODY,
                *self._fill(body_nodes, head.end_byte, body_end, self._statement),
            ),
        ]
        if end is not None:
            parts.append(branch(NodeKind.COMPOUND_EXPR, self._command(end)))
            parts.extend(self._gaps(end.end_byte, node.end_byte))
        return branch(NodeKind.BLOCK, *parts)

    def _command(self, node: Node) -> Draft:
        children = _present(node.children)
        open_index = next(
            (i for i, child in enumerate(children) if child.type == "("), None
        )
        if open_index is None:
            return leaf(NodeKind.ERROR, self._text(node.start_byte, node.end_byte))
        open_paren = children[open_index]

        close_index = None
        for i in range(len(children) - 1, open_index, -1):
            if children[i].type == ")":
                close_index = i
                break

        # The command name is everything before "(", minus trailing blanks
        name_text = self._text(node.start_byte, open_paren.start_byte)
        command_name = name_text.rstrip()
        parts = [leaf(NodeKind.COMMAND_NAME, command_name)]
        if len(command_name) < len(name_text):
            parts.append(leaf(NodeKind.WHITESPACE, name_text[len(command_name) :]))
        parts.append(leaf(NodeKind.LPAREN, "("))

        inner_end = close_index if close_index is not None else len(children)
        arguments_end = (
            children[close_index].start_byte
            if close_index is not None
            else node.end_byte
        )
        arguments = _flatten_arguments(children[open_index + 1 : inner_end])
        parts.append(
            branch(
                NodeKind.ARGUMENTS,
                *self._fill(
                    arguments, open_paren.end_byte, arguments_end, self._argument
                ),
            )
        )

        if close_index is not None:
            close_paren = children[close_index]
            parts.append(leaf(NodeKind.RPAREN, ")"))
            parts.extend(self._gaps(close_paren.end_byte, node.end_byte))
        return branch(NodeKind.COMMAND_EXPR, *parts)

    def _argument(self, node: Node) -> Draft:
        text = self._text(node.start_byte, node.end_byte)
        if node.type in _COMMENT_TYPES:
            return leaf(NodeKind.COMMENT, text)
        if node.type == "(":
            return leaf(NodeKind.LPAREN, text)
        if node.type == ")":
            return leaf(NodeKind.RPAREN, text)
        if node.type == _ERROR_TYPE:
            return leaf(NodeKind.ERROR, text)
        return leaf(NodeKind.ARGUMENT, text)

    def _fill(
        self,
        nodes: Sequence[Node],
        start: int,
        end: int,
        convert: Callable[[Node], Draft],
    ) -> list[Draft]:
        """Convert nodes lying in [start, end) and cover the gaps between them."""
        drafts: list[Draft] = []
        cursor = start
        for node in _present(nodes):
            if node.start_byte < cursor:
                continue
            drafts.extend(self._gaps(cursor, node.start_byte))
            drafts.append(convert(node))
            cursor = node.end_byte
        drafts.extend(self._gaps(cursor, end))
        return drafts

    def _gaps(self, start: int, end: int) -> list[Draft]:
        if end <= start:
            return []
        text = self._text(start, end)
        kind = NodeKind.WHITESPACE if text.isspace() else NodeKind.ERROR
        return [leaf(kind, text)]

    def _text(self, start: int, end: int) -> str:
        return self._source[start:end].decode(_DEFAULT_ENCODING)


def _present(nodes: Sequence[Node]) -> list[Node]:
    # Zero-width nodes are tokens tree-sitter inserted to recover from errors
    return [node for node in nodes if node.end_byte > node.start_byte]


def _is_command(node: Node) -> bool:
    return node.type == _NORMAL_COMMAND_TYPE or node.type.endswith(_COMMAND_SUFFIX)


def _is_block(node: Node) -> bool:
    named = [child for child in _present(node.children) if child.is_named]
    return bool(named) and not _is_command(node) and _is_command(named[0])


def _flatten_body(nodes: Sequence[Node]) -> list[Node]:
    flat: list[Node] = []
    for node in nodes:
        if node.type == _BODY_TYPE:
            flat.extend(_present(node.children))
        else:
            flat.append(node)
    return flat


def _flatten_arguments(nodes: Sequence[Node]) -> list[Node]:
    flat: list[Node] = []
    for node in nodes:
        if node.type == _ARGUMENT_LIST_TYPE:
            flat.extend(_flatten_arguments(node.children))
        else:
            flat.append(node)
    return flat
