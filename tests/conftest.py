"""Shared fixtures for cmake_outline tests."""

import pytest

from cmake_outline.syntax import Draft, NodeKind, SyntaxNode, branch, build, leaf


class CMakeTreeFactory:
    """Builds syntax trees shaped the way CMakeParser shapes them.

    Statements of a file are separated by newlines and block bodies are
    indented by four spaces, so ``file(block("function", "foo", "a"))``
    stands for::

        function(foo a)
        endfunction()
    """

    def command(self, name: str, *arguments: str) -> Draft:
        """Describe a command invocation such as ``message(hi there)``."""
        parts: list[Draft] = []
        for i, argument in enumerate(arguments):
            if i:
                parts.append(leaf(NodeKind.WHITESPACE, " "))
            parts.append(leaf(NodeKind.ARGUMENT, argument))
        return branch(
            NodeKind.COMMAND_EXPR,
            leaf(NodeKind.COMMAND_NAME, name),
            leaf(NodeKind.LPAREN, "("),
            branch(NodeKind.ARGUMENTS, *parts),
            leaf(NodeKind.RPAREN, ")"),
        )

    def block(
        self,
        command: str,
        *arguments: str,
        body: tuple[Draft, ...] = (),
        end: str | None = None,
    ) -> Draft:
        """Describe a block such as ``function(foo) ... endfunction()``."""
        body_parts: list[Draft] = []
        for statement in body:
            body_parts.append(leaf(NodeKind.WHITESPACE, "\n    "))
            body_parts.append(statement)
        body_parts.append(leaf(NodeKind.WHITESPACE, "\n"))
        return branch(
            NodeKind.BLOCK,
            branch(NodeKind.COMPOUND_EXPR, self.command(command, *arguments)),
            branch(NodeKind.BODY, *body_parts),
            branch(NodeKind.COMPOUND_EXPR, self.command(end or f"end{command}")),
        )

    def comment(self, text: str) -> Draft:
        """Describe a line comment."""
        return leaf(NodeKind.COMMENT, text)

    def file(self, *statements: Draft, name: str = "CMakeLists.txt") -> SyntaxNode:
        """Build a FILE tree with one file element per statement."""
        parts: list[Draft] = []
        for statement in statements:
            parts.append(branch(NodeKind.FILE_ELEMENT, statement))
            parts.append(leaf(NodeKind.WHITESPACE, "\n"))
        return build(branch(NodeKind.FILE, *parts, name=name))


@pytest.fixture
def trees() -> CMakeTreeFactory:
    """Factory for hand-built CMake syntax trees."""
    return CMakeTreeFactory()
