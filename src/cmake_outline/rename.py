"""Reading and replacing definition names."""

import re

from cmake_outline.errors import InvalidNameError
from cmake_outline.matcher import Definition, match_block
from cmake_outline.syntax import SyntaxNode, replace_leaf

# Characters that would split the name token or change its meaning
_ILLEGAL_NAME_CHARACTERS = re.compile(r"[\s()\"'#\\]")


def get_name(definition: Definition) -> str:
    """Return the name of a definition."""
    return definition.name


def get_name_identifier(definition: Definition) -> SyntaxNode:
    """Return the argument token holding the definition name."""
    return definition.name_node


def validate_name(name: str) -> str:
    """Validate a replacement identifier for a definition.

    Args:
        name: Proposed name

    Returns:
        The name, unchanged

    Raises:
        InvalidNameError: If the name is empty or contains whitespace,
            parentheses, quotes, a backslash or a comment marker

    """
    if not name:
        raise InvalidNameError("Definition name must not be empty")
    illegal = _ILLEGAL_NAME_CHARACTERS.search(name)
    if illegal is not None:
        raise InvalidNameError(
            f"Definition name {name!r} contains illegal character {illegal.group()!r}"
        )
    return name


def set_name(definition: Definition, new_name: str) -> Definition:
    """Return a copy of a definition with its name token replaced.

    The anchor block is rebuilt with the new name; everything else in it is
    kept as is, and the original tree is not modified.

    Args:
        definition: Definition to rename
        new_name: Replacement identifier

    Returns:
        New definition anchored at the rebuilt block

    Raises:
        InvalidNameError: If new_name is not a valid bare identifier

    """
    validate_name(new_name)

    anchor = replace_leaf(definition.anchor, definition.name_node, new_name)
    renamed = match_block(anchor, definition.file)
    if renamed is None or renamed.name != new_name:
        raise InvalidNameError(f"Definition cannot be renamed to {new_name!r}")
    return renamed
