"""Recognition of function and macro definitions in a CMake syntax tree.

A definition is a top-level block whose head is a command invocation:

    file
    |-file_element
      |-block
        |-compound_expr
        | |-command_expr <<function(name args...)>>
        |-body
        |-compound_expr <<endfunction()>>

Only direct children of the file root are considered, so blocks nested in a
function body are never reported on their own.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import NamedTuple

from cmake_outline.models import DefinitionModel
from cmake_outline.protocols import FileId
from cmake_outline.syntax import (
    DEFAULT_FILE_NAME,
    NodeKind,
    Span,
    SyntaxNode,
    find_child_by_kind,
)


class DefinitionKind(Enum):
    """Classification of a definition.

    UNKNOWN is never produced by the matcher; it exists for surfacing
    blocks whose command could not be classified.
    """

    FUNCTION = "function"
    MACRO = "macro"
    UNKNOWN = "unknown"


# Commands opening a definition block (CMake command names are case-insensitive)
_DEFINITION_COMMANDS: dict[str, DefinitionKind] = {
    "function": DefinitionKind.FUNCTION,
    "macro": DefinitionKind.MACRO,
}

# Bracket argument such as [[name]] or [==[name]==]
_BRACKET_ARGUMENT = re.compile(r"\[(=*)\[(.*)\]\1\]", re.DOTALL)


@dataclass(frozen=True, slots=True)
class Presentation:
    """Text shown for a definition and where it lives."""

    text: str
    location: str


@dataclass(frozen=True, slots=True, eq=False)
class Definition:
    """A named function or macro definition.

    Two definitions are equal when they have the same name, kind and file and
    their anchors cover the same span.
    """

    name: str
    kind: DefinitionKind
    anchor: SyntaxNode
    file: FileId

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Definition name must not be empty")

    @property
    def head(self) -> SyntaxNode:
        """The command invocation opening the definition."""
        return self._head_match().head

    @property
    def name_node(self) -> SyntaxNode:
        """The argument token holding the definition name."""
        return self._head_match().name_node

    @property
    def span(self) -> Span:
        """Source span of the whole definition block."""
        return self.anchor.span

    def presentation(self) -> Presentation:
        """Return the verbatim head text and the owning file."""
        return Presentation(text=self.head.text, location=self.file)

    def to_model(self) -> DefinitionModel:
        """Convert to the wire model."""
        return DefinitionModel(
            name=self.name,
            kind=self.kind.value,
            file=self.file,
            head=self.head.text,
            line_start=self.span.line_start,
            line_end=self.span.line_end,
        )

    def _head_match(self) -> "_HeadMatch":
        head_match = _match_head(self.anchor)
        if head_match is None:
            raise ValueError("Definition anchor is not a definition block")
        return head_match

    def _key(self) -> tuple[str, DefinitionKind, str, Span]:
        return (self.name, self.kind, self.file, self.anchor.span)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Definition):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())


class _HeadMatch(NamedTuple):
    head: SyntaxNode
    name_node: SyntaxNode
    name: str
    kind: DefinitionKind


def classify_command(command_name: str) -> DefinitionKind | None:
    """Map a command name to the kind of definition it opens.

    Args:
        command_name: Raw text of the command name token

    Returns:
        DefinitionKind, or None if the command does not open a definition

    """
    return _DEFINITION_COMMANDS.get(command_name.lower())


def match_definition(node: SyntaxNode, file: FileId | None = None) -> Definition | None:
    """Recognise a definition at a top-level node of a file.

    Args:
        node: Direct child of a FILE root
        file: File the node belongs to (defaults to the root's name)

    Returns:
        Definition, or None when the node is not a definition block

    """
    if node.kind is not NodeKind.FILE_ELEMENT:
        return None
    parent = node.parent
    if parent is not None and parent.kind is not NodeKind.FILE:
        return None

    block = _first_significant(node, NodeKind.BLOCK)
    if block is None:
        return None
    return match_block(block, file if file is not None else _file_of(node))


def match_block(block: SyntaxNode, file: FileId) -> Definition | None:
    """Recognise a definition from its block node.

    Args:
        block: BLOCK node
        file: File the block belongs to

    Returns:
        Definition, or None when the block is not a function or macro

    """
    head_match = _match_head(block)
    if head_match is None:
        return None
    return Definition(
        name=head_match.name,
        kind=head_match.kind,
        anchor=block,
        file=file,
    )


def file_definitions(root: SyntaxNode, file: FileId | None = None) -> list[Definition]:
    """Collect the definitions of a file in source order.

    Args:
        root: FILE root node
        file: File identifier (defaults to the root's name)

    Returns:
        Definitions, empty if root is not a FILE node

    """
    if root.kind is not NodeKind.FILE:
        return []
    owner = file if file is not None else _file_of(root)

    definitions: list[Definition] = []
    for element in root.children:
        definition = match_definition(element, owner)
        if definition is not None:
            definitions.append(definition)
    return definitions


def _match_head(block: SyntaxNode) -> _HeadMatch | None:
    if block.kind is not NodeKind.BLOCK:
        return None
    compound = _first_significant(block, NodeKind.COMPOUND_EXPR)
    if compound is None:
        return None
    head = _first_significant(compound, NodeKind.COMMAND_EXPR)
    if head is None:
        return None

    match head.significant_children:
        case (
            SyntaxNode(kind=NodeKind.COMMAND_NAME, text=command_name),
            SyntaxNode(kind=NodeKind.LPAREN),
            SyntaxNode(kind=NodeKind.ARGUMENTS) as arguments,
            SyntaxNode(kind=NodeKind.RPAREN),
        ):
            kind = classify_command(command_name)
        case _:
            return None

    if kind is None:
        return None
    name_node = find_child_by_kind(arguments, NodeKind.ARGUMENT)
    if name_node is None:
        return None
    name = _argument_value(name_node.text)
    if not name:
        return None
    return _HeadMatch(head=head, name_node=name_node, name=name, kind=kind)


def _argument_value(text: str) -> str:
    """Strip the delimiters of a quoted or bracket argument."""
    if len(text) >= 2 and text[0] == text[-1] == '"':
        return text[1:-1]
    bracket = _BRACKET_ARGUMENT.fullmatch(text)
    if bracket is not None:
        return bracket.group(2)
    return text


def _first_significant(node: SyntaxNode, kind: NodeKind) -> SyntaxNode | None:
    children = node.significant_children
    if children and children[0].kind is kind:
        return children[0]
    return None


def _file_of(node: SyntaxNode) -> FileId:
    root = node.root
    if root.kind is NodeKind.FILE and root.name:
        return FileId(root.name)
    return FileId(DEFAULT_FILE_NAME)
