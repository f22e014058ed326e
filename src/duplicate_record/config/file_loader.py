"""File-based configuration loading from `pyproject.toml`."""

from pathlib import Path
import tomllib
from typing import Any

TOOL_SECTION = "duplicate_record"


class ConfigFileError(Exception):
    """Raised when configuration file loading fails."""

    def __init__(
        self, file_path: Path, message: str, cause: Exception | None = None
    ) -> None:
        """Initialize with file path, message, and optional cause."""
        self.file_path = file_path
        self.message = message
        self.cause = cause
        super().__init__(f"Config file error in {file_path}: {message}")


class FileConfigLoader:
    """Loads the `[tool.duplicate_record]` table from the nearest pyproject.toml."""

    def load_project_config(self, project_root: Path | None = None) -> dict[str, Any]:
        """Load configuration from pyproject.toml.

        Args:
            project_root: Directory to start searching from. If None, searches
                the current directory and its parents.

        Returns:
            The tool table as a dict; empty when there is no file or no table.

        Raises:
            ConfigFileError: If the file exists but cannot be parsed, or the
                tool entry is not a table.
        """
        pyproject_path = self._find_pyproject_toml(project_root)
        if not pyproject_path:
            return {}

        try:
            with pyproject_path.open(mode="rb") as f:
                data = tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as e:
            raise ConfigFileError(
                pyproject_path, f"Failed to parse TOML: {e}", cause=e
            ) from e

        section = data.get("tool", {}).get(TOOL_SECTION, {})
        if not isinstance(section, dict):
            raise ConfigFileError(
                pyproject_path, f"[tool.{TOOL_SECTION}] must be a table"
            )
        return dict(section)

    def _find_pyproject_toml(self, start_dir: Path | None = None) -> Path | None:
        """Find pyproject.toml by searching up the directory tree."""
        current = Path(start_dir or Path.cwd()).resolve()
        while current != current.parent:
            candidate = current / "pyproject.toml"
            if candidate.exists():
                return candidate
            current = current.parent
        return None
