"""Tests for ProjectConfig."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from cmake_outline.config import DEFAULT_INCLUDE_PATTERNS, ProjectConfig
from cmake_outline.errors import ConfigurationError


class TestProjectConfig:
    """Test validation of project configuration."""

    def test_defaults(self, tmp_path: Path) -> None:
        """Test that only root is required and defaults select CMake files."""
        config = ProjectConfig.from_properties({"root": str(tmp_path)})

        assert config.root == tmp_path
        assert config.include_patterns == DEFAULT_INCLUDE_PATTERNS
        assert config.exclude_patterns == []
        assert config.encoding == "utf-8"
        assert config.errors == "strict"
        assert config.max_workers == 1

    def test_root_path_is_stripped(self, tmp_path: Path) -> None:
        """Test that surrounding whitespace in the root string is ignored."""
        config = ProjectConfig.from_properties({"root": f"  {tmp_path}  "})

        assert config.root == tmp_path

    def test_missing_root(self) -> None:
        """Test that a missing root is reported clearly."""
        with pytest.raises(ConfigurationError, match="root property is required"):
            ProjectConfig.from_properties({})

    def test_blank_root(self) -> None:
        """Test that a blank root string is rejected."""
        with pytest.raises(ConfigurationError, match="root property is required"):
            ProjectConfig.from_properties({"root": "   "})

    def test_nonexistent_root(self, tmp_path: Path) -> None:
        """Test that a root that does not exist is rejected."""
        with pytest.raises(ConfigurationError, match="Path does not exist"):
            ProjectConfig.from_properties({"root": str(tmp_path / "missing")})

    def test_root_must_be_directory(self, tmp_path: Path) -> None:
        """Test that a file root is rejected."""
        file_path = tmp_path / "CMakeLists.txt"
        file_path.write_text("project(demo)\n")

        with pytest.raises(ConfigurationError, match="must be a directory"):
            ProjectConfig.from_properties({"root": str(file_path)})

    def test_invalid_error_handling(self, tmp_path: Path) -> None:
        """Test that unknown decoding error strategies are rejected."""
        with pytest.raises(ConfigurationError, match="errors must be one of"):
            ProjectConfig.from_properties({"root": str(tmp_path), "errors": "loose"})

    @pytest.mark.parametrize("field", ["max_files", "max_file_size", "max_workers"])
    def test_limits_must_be_positive(self, tmp_path: Path, field: str) -> None:
        """Test that numeric limits must be greater than zero."""
        with pytest.raises(ConfigurationError):
            ProjectConfig.from_properties({"root": str(tmp_path), field: 0})

    def test_unknown_properties_are_rejected(self, tmp_path: Path) -> None:
        """Test that extra properties are not silently ignored."""
        with pytest.raises(ConfigurationError):
            ProjectConfig.from_properties({"root": str(tmp_path), "language": "cmake"})

    def test_config_is_immutable(self, tmp_path: Path) -> None:
        """Test that configuration cannot be changed after creation."""
        config = ProjectConfig(root=tmp_path)

        with pytest.raises(ValidationError):
            config.max_workers = 4  # type: ignore[misc]
