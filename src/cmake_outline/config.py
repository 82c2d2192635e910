"""Configuration for filesystem-backed CMake projects."""

from pathlib import Path
from typing import Annotated, Any, Self

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
)

from cmake_outline.errors import ConfigurationError

# Files recognised as CMake sources
DEFAULT_INCLUDE_PATTERNS = ["CMakeLists.txt", "*.cmake"]


def _validate_root(v: str | Path | None) -> Path:
    """Validate that root is an existing directory and convert to Path."""
    if v is None:
        raise ValueError("root property is required")

    if isinstance(v, str):
        if not v.strip():
            raise ValueError("root property is required")
        path_obj = Path(v.strip())
    else:
        path_obj = v

    if not path_obj.exists():
        raise ValueError(f"Path does not exist: {path_obj}")
    if not path_obj.is_dir():
        raise ValueError(f"Path must be a directory: {path_obj}")

    return path_obj


class ProjectConfig(BaseModel):
    """Configuration for FilesystemProject with Pydantic validation.

    Patterns use Git-style wildmatch semantics relative to the root, so the
    default ``CMakeLists.txt`` pattern matches the file at any depth.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    root: Annotated[Path, BeforeValidator(_validate_root)] = Field(
        description="Project directory to enumerate CMake files from"
    )
    include_patterns: list[str] = Field(
        default_factory=lambda: list(DEFAULT_INCLUDE_PATTERNS),
        description="Glob patterns selecting CMake sources",
    )
    exclude_patterns: list[str] = Field(
        default_factory=list,
        description="Glob patterns of files to skip (applied after include_patterns)",
    )
    encoding: str = Field(
        default="utf-8",
        description="Text encoding to use when reading files",
    )
    errors: str = Field(
        default="strict",
        description="How to handle encoding errors (strict, replace, ignore)",
    )
    max_files: int = Field(
        default=10000,
        description="Maximum number of files to enumerate",
        gt=0,
    )
    max_file_size: int = Field(
        default=10 * 1024 * 1024,  # 10MB
        description="Skip files larger than this size in bytes",
        gt=0,
    )
    max_workers: int = Field(
        default=1,
        description="Number of threads used to scan files",
        gt=0,
    )

    @field_validator("errors")
    @classmethod
    def validate_error_handling(cls, v: str) -> str:
        """Validate error handling strategy."""
        allowed = ["strict", "replace", "ignore"]
        if v not in allowed:
            raise ValueError(f"errors must be one of {allowed}, got: {v}")
        return v

    @classmethod
    def from_properties(cls, properties: dict[str, Any]) -> Self:
        """Create configuration from a properties dictionary.

        Args:
            properties: Raw configuration values

        Returns:
            Validated configuration object

        Raises:
            ConfigurationError: If validation fails or root is missing

        """
        try:
            return cls.model_validate(properties)
        except ValidationError as e:
            for error in e.errors():
                if error["loc"] == ("root",) and error["type"] == "missing":
                    raise ConfigurationError("root property is required") from e
            raise ConfigurationError(f"Invalid project configuration: {e}") from e
        except ValueError as e:
            raise ConfigurationError(f"Invalid project configuration: {e}") from e
