"""Outline of a single CMake file.

The outline is rooted at the file and lists, in source order, every
function and macro defined at the top level of the file.
"""

from dataclasses import dataclass
from enum import Enum

from cmake_outline.matcher import DefinitionKind, match_definition
from cmake_outline.models import OutlineModel
from cmake_outline.protocols import FileId
from cmake_outline.syntax import DEFAULT_FILE_NAME, NodeKind, SyntaxNode


class OutlineKind(Enum):
    """Kind of an outline node."""

    FILE = "file"
    DEFINITION = "definition"


@dataclass(frozen=True, slots=True)
class OutlineNode:
    """A node of a file outline.

    Attributes:
        label: Text shown for the node
        kind: Whether the node stands for the file or a definition
        anchor: Syntax node the outline entry navigates to
        children: Child entries in source order (never None)
        definition_kind: Function or macro for definition entries

    """

    label: str
    kind: OutlineKind
    anchor: SyntaxNode
    children: tuple["OutlineNode", ...] = ()
    definition_kind: DefinitionKind | None = None

    def to_model(self) -> OutlineModel:
        """Convert to the wire model, recursively."""
        return OutlineModel(
            label=self.label,
            kind=self.kind.value,
            definition_kind=(
                self.definition_kind.value if self.definition_kind else None
            ),
            line_start=self.anchor.span.line_start,
            line_end=self.anchor.span.line_end,
            children=[child.to_model() for child in self.children],
        )


def build_outline(file: SyntaxNode, name: str | None = None) -> OutlineNode:
    """Build the outline of a parsed file.

    Definition entries are labelled with the verbatim text of the command
    invocation opening the block, e.g. ``function(add_tests a b)``.

    Args:
        file: FILE root node
        name: Display name of the file (defaults to the root's name)

    Returns:
        Root outline node of kind FILE

    """
    label = name or file.name or DEFAULT_FILE_NAME
    if file.kind is not NodeKind.FILE:
        return OutlineNode(label=label, kind=OutlineKind.FILE, anchor=file)

    children: list[OutlineNode] = []
    for element in file.children:
        definition = match_definition(element, FileId(label))
        if definition is None:
            continue
        children.append(
            OutlineNode(
                label=definition.head.text,
                kind=OutlineKind.DEFINITION,
                anchor=definition.anchor,
                definition_kind=definition.kind,
            )
        )

    return OutlineNode(
        label=label,
        kind=OutlineKind.FILE,
        anchor=file,
        children=tuple(children),
    )
