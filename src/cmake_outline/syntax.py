"""Immutable syntax tree model for CMake sources.

The tree is a closed set of node kinds. Parsers do not construct nodes
directly: they describe the tree with lightweight drafts (``leaf`` and
``branch``) and call ``build``, which assigns spans, line numbers and parent
links in a single pass. A built tree is never mutated; edits go through
``replace_leaf``, which returns an entirely new tree.
"""

import weakref
from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum
from typing import NamedTuple

# Display name used for trees created from text without a backing file
DEFAULT_FILE_NAME = "cmake.dummy"


class NodeKind(Enum):
    """Kind tag of a syntax node."""

    FILE = "file"
    FILE_ELEMENT = "file_element"
    BLOCK = "block"
    COMPOUND_EXPR = "compound_expr"
    COMMAND_EXPR = "command_expr"
    COMMAND_NAME = "command_name"
    LPAREN = "lparen"
    RPAREN = "rparen"
    ARGUMENTS = "arguments"
    ARGUMENT = "argument"
    BODY = "body"
    COMMENT = "comment"
    WHITESPACE = "whitespace"
    ERROR = "error"


# Kinds that never carry structure of their own
_TRIVIAL_KINDS = frozenset({NodeKind.WHITESPACE, NodeKind.COMMENT})


@dataclass(frozen=True, slots=True)
class Span:
    """Location of a node in its source text.

    Attributes:
        start: Character offset of the first character (inclusive)
        end: Character offset after the last character (exclusive)
        line_start: 1-based line of the first character
        line_end: 1-based line of the last character

    """

    start: int
    end: int
    line_start: int
    line_end: int

    @property
    def length(self) -> int:
        """Number of characters covered by the span."""
        return self.end - self.start


@dataclass(frozen=True, slots=True, weakref_slot=True)
class SyntaxNode:
    """A node of an immutable CMake syntax tree.

    Branch text is always the concatenation of its children's text, so the
    text of the FILE node is the complete source. The parent link is a weak
    reference: a node never keeps its ancestors alive.
    """

    kind: NodeKind
    text: str
    span: Span
    children: tuple["SyntaxNode", ...] = ()
    name: str | None = None
    _parent: "weakref.ReferenceType[SyntaxNode] | None" = field(
        default=None, init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        for child in self.children:
            object.__setattr__(child, "_parent", weakref.ref(self))

    @property
    def parent(self) -> "SyntaxNode | None":
        """Parent node, or None for a root or once the parent is collected."""
        if self._parent is None:
            return None
        return self._parent()

    @property
    def is_leaf(self) -> bool:
        """Whether the node has no children."""
        return not self.children

    @property
    def first_child(self) -> "SyntaxNode | None":
        """First child including trivia, or None for leaves."""
        return self.children[0] if self.children else None

    @property
    def significant_children(self) -> tuple["SyntaxNode", ...]:
        """Children with whitespace and comments filtered out."""
        return tuple(child for child in self.children if not is_trivial_node(child))

    @property
    def root(self) -> "SyntaxNode":
        """Topmost reachable ancestor (the node itself if it has no parent)."""
        node = self
        while (parent := node.parent) is not None:
            node = parent
        return node


class Draft(NamedTuple):
    """Unplaced description of a node, turned into a SyntaxNode by ``build``."""

    kind: NodeKind
    text: str
    children: tuple["Draft", ...]
    name: str | None = None


def leaf(kind: NodeKind, text: str) -> Draft:
    """Describe a token node."""
    return Draft(kind, text, ())


def branch(kind: NodeKind, *children: Draft, name: str | None = None) -> Draft:
    """Describe a node composed of the given children."""
    return Draft(kind, "", tuple(children), name)


def build(draft: Draft, start: int = 0, line: int = 1) -> SyntaxNode:
    """Build an immutable tree from a draft.

    Args:
        draft: Description of the root node
        start: Character offset at which the root begins
        line: 1-based line at which the root begins

    Returns:
        Root SyntaxNode with spans and parent links assigned

    """
    if not draft.children:
        return SyntaxNode(
            kind=draft.kind,
            text=draft.text,
            span=_span_for(draft.text, start, line),
            name=draft.name,
        )

    children: list[SyntaxNode] = []
    offset = start
    current_line = line
    for child_draft in draft.children:
        child = build(child_draft, offset, current_line)
        children.append(child)
        offset = child.span.end
        current_line = child.span.line_start + child.text.count("\n")

    text = "".join(child.text for child in children)
    return SyntaxNode(
        kind=draft.kind,
        text=text,
        span=_span_for(text, start, line),
        children=tuple(children),
        name=draft.name,
    )


def to_draft(node: SyntaxNode) -> Draft:
    """Describe an existing node so it can be rebuilt elsewhere."""
    if node.is_leaf:
        return Draft(node.kind, node.text, (), node.name)
    return Draft(
        node.kind, "", tuple(to_draft(child) for child in node.children), node.name
    )


def replace_leaf(node: SyntaxNode, target: SyntaxNode, text: str) -> SyntaxNode:
    """Return a new tree equal to ``node`` except for the text of ``target``.

    The new tree starts at the same offset and line as ``node``. The original
    tree is left untouched.

    Args:
        node: Root of the sub-tree to rebuild
        target: Leaf inside ``node`` whose text is replaced (matched by identity)
        text: Replacement text for the leaf

    Returns:
        Root of the rebuilt sub-tree

    Raises:
        ValueError: If target is not a leaf of node

    """
    if not target.is_leaf:
        raise ValueError(f"Only leaf nodes can be replaced, got {target.kind.value}")

    found = False

    def substitute(current: SyntaxNode) -> Draft:
        nonlocal found
        if current is target:
            found = True
            return Draft(current.kind, text, (), current.name)
        if current.is_leaf:
            return Draft(current.kind, current.text, (), current.name)
        return Draft(
            current.kind,
            "",
            tuple(substitute(child) for child in current.children),
            current.name,
        )

    draft = substitute(node)
    if not found:
        raise ValueError("Target node is not part of the given tree")
    return build(draft, node.span.start, node.span.line_start)


def walk(node: SyntaxNode) -> Iterator[SyntaxNode]:
    """Yield ``node`` and all of its descendants in pre-order."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children))


def find_child_by_kind(node: SyntaxNode, kind: NodeKind) -> SyntaxNode | None:
    """Find the first direct child of a specific kind.

    Args:
        node: Parent node to search in
        kind: Kind of child node to find

    Returns:
        First matching child node or None

    """
    for child in node.children:
        if child.kind is kind:
            return child
    return None


def find_children_by_kind(node: SyntaxNode, kind: NodeKind) -> list[SyntaxNode]:
    """Find all direct children of a specific kind."""
    return [child for child in node.children if child.kind is kind]


def find_nodes_by_kind(node: SyntaxNode, kind: NodeKind) -> list[SyntaxNode]:
    """Find all descendant nodes of a specific kind (depth-first order)."""
    return [current for current in walk(node) if current.kind is kind]


def is_trivial_node(node: SyntaxNode) -> bool:
    """Check if a node represents whitespace or a comment."""
    return node.kind in _TRIVIAL_KINDS


def _span_for(text: str, start: int, line: int) -> Span:
    # A trailing newline belongs to the line it terminates
    line_end = line + text[:-1].count("\n") if text else line
    return Span(start=start, end=start + len(text), line_start=line, line_end=line_end)
