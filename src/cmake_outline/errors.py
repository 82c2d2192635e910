"""Error classes for cmake_outline.

This module provides:
- CMakeOutlineError: Base exception class for all library errors
- ConfigurationError: Invalid project configuration
- ParserError: Source text could not be turned into a syntax tree
- InvalidNameError: Rejected replacement identifier for a definition
- ScanCancelledError: A scope scan was interrupted by the caller
"""


class CMakeOutlineError(Exception):
    """Base exception for all cmake_outline errors."""

    pass


class ConfigurationError(CMakeOutlineError):
    """Raised when project configuration is invalid."""

    pass


class ParserError(CMakeOutlineError):
    """Raised when source text cannot be parsed into a syntax tree."""

    pass


class InvalidNameError(CMakeOutlineError):
    """Raised when a definition cannot be renamed to the requested identifier."""

    pass


class ScanCancelledError(CMakeOutlineError):
    """Raised when a scope scan is interrupted between files."""

    pass
