"""Pydantic wire models for exporting definitions and outlines."""

from pydantic import BaseModel


class DefinitionModel(BaseModel):
    """A function or macro definition found in a CMake file."""

    name: str
    kind: str  # "function", "macro", "unknown"
    file: str
    head: str
    line_start: int
    line_end: int


class OutlineModel(BaseModel):
    """A node of a file outline."""

    label: str
    kind: str  # "file", "definition"
    definition_kind: str | None = None
    line_start: int
    line_end: int
    children: list["OutlineModel"] = []
