"""Tests for reading and replacing definition names."""

import pytest

from cmake_outline.errors import InvalidNameError
from cmake_outline.matcher import DefinitionKind, file_definitions
from cmake_outline.rename import get_name, get_name_identifier, set_name, validate_name
from cmake_outline.syntax import NodeKind


@pytest.fixture
def definition(trees):
    """A function definition with arguments and a body."""
    root = trees.file(
        trees.command("project", "demo"),
        trees.block(
            "function", "foo", "a", "b", body=(trees.command("message", "${a}"),)
        ),
    )
    return file_definitions(root)[0]


class TestGetName:
    """Test reading the name of a definition."""

    def test_get_name(self, definition):
        """Test that the definition name is returned."""
        assert get_name(definition) == "foo"

    def test_get_name_identifier(self, definition):
        """Test that the name token is the first argument of the head."""
        identifier = get_name_identifier(definition)

        assert identifier.kind is NodeKind.ARGUMENT
        assert identifier.text == "foo"
        assert identifier.parent is not None
        assert identifier.parent.kind is NodeKind.ARGUMENTS


class TestSetName:
    """Test renaming definitions."""

    def test_rename_succeeds(self, definition):
        """Test that a valid name produces a renamed definition."""
        renamed = set_name(definition, "baz")

        assert get_name(renamed) == "baz"
        assert renamed.kind is DefinitionKind.FUNCTION
        assert renamed.file == definition.file
        assert renamed.head.text == "function(baz a b)"

    def test_rest_of_anchor_is_unchanged(self, definition):
        """Test that only the name token differs in the rebuilt anchor."""
        renamed = set_name(definition, "baz")

        assert renamed.anchor.text == definition.anchor.text.replace(
            "function(foo", "function(baz", 1
        )
        assert [n.kind for n in renamed.anchor.children] == [
            n.kind for n in definition.anchor.children
        ]
        assert renamed.anchor.span.start == definition.anchor.span.start
        assert renamed.anchor.span.line_start == definition.anchor.span.line_start

    def test_original_is_not_modified(self, definition):
        """Test that renaming leaves the original definition and tree intact."""
        original_text = definition.anchor.text

        set_name(definition, "baz")

        assert definition.name == "foo"
        assert definition.anchor.text == original_text
        assert definition.head.text == "function(foo a b)"

    @pytest.mark.parametrize(
        "new_name",
        [
            "",
            "bad name",
            "tab\tname",
            "new\nline",
            "call()",
            "(x",
            'q"uote',
            "it's",
            "foo\\",
            "a\\;b",
        ],
        ids=[
            "empty",
            "space",
            "tab",
            "newline",
            "parens",
            "lparen",
            "dquote",
            "squote",
            "trailing_backslash",
            "escape",
        ],
    )
    def test_invalid_names_are_rejected(self, definition, new_name: str) -> None:
        """Test that structurally illegal identifiers raise InvalidNameError."""
        with pytest.raises(InvalidNameError):
            set_name(definition, new_name)

    def test_comment_marker_is_rejected(self, definition):
        """Test that a name containing a comment marker is rejected."""
        with pytest.raises(InvalidNameError, match="illegal character '#'"):
            set_name(definition, "foo#bar")


class TestValidateName:
    """Test standalone name validation."""

    @pytest.mark.parametrize(
        "name", ["baz", "my_function", "Foo2", "ns::helper", "with-dash", "${prefix}_x"]
    )
    def test_valid_names(self, name: str) -> None:
        """Test that bare identifiers are accepted unchanged."""
        assert validate_name(name) == name

    def test_backslash_message(self) -> None:
        """Test that an escape character is reported as illegal."""
        with pytest.raises(InvalidNameError, match="illegal character"):
            validate_name("foo\\")

    def test_empty_name_message(self) -> None:
        """Test the error raised for an empty name."""
        with pytest.raises(InvalidNameError, match="must not be empty"):
            validate_name("")
