"""Configuration resolution with precedence handling.

Merges configuration according to the documented precedence order:
Programmatic > Environment > Project file > Defaults
"""

from pathlib import Path
from typing import Any

from .env_loader import EnvironmentConfigLoader
from .file_loader import FileConfigLoader
from .schema import DuplicateRecordSettings
from .types import ConfigOrigin, ResolvedConfig


class ConfigResolver:
    """Resolves configuration from multiple sources with proper precedence."""

    def __init__(self) -> None:
        """Initialize the configuration resolver."""
        self.file_loader = FileConfigLoader()
        self.env_loader = EnvironmentConfigLoader()

    def resolve(
        self,
        programmatic: dict[str, Any] | None = None,
        *,
        use_env_file: str | Path | None = None,
        project_root: Path | None = None,
    ) -> ResolvedConfig:
        """Resolve configuration from all sources with proper precedence.

        Args:
            programmatic: Programmatic overrides (highest precedence).
            use_env_file: Optional .env file to load.
            project_root: Directory to search for pyproject.toml.

        Returns:
            ResolvedConfig with merged values and origin tracking.

        Raises:
            ValueError: If validation fails.
            ConfigFileError: If pyproject.toml is malformed.
        """
        origin: dict[str, ConfigOrigin] = {}
        merged: dict[str, Any] = {}

        # Step 1: schema defaults (read from the model, not the environment)
        for field, info in DuplicateRecordSettings.model_fields.items():
            merged[field] = info.get_default(call_default_factory=True)
            origin[field] = "default"

        # Step 2: project file
        for field, value in self.file_loader.load_project_config(
            project_root=project_root
        ).items():
            if field in merged:  # Only override known fields
                merged[field] = value
                origin[field] = "file"

        # Step 3: environment
        try:
            env_config = self.env_loader.load_env_config(env_file=use_env_file)
        except (ValueError, FileNotFoundError) as e:
            raise ValueError(f"Environment configuration error: {e}") from e
        for field, value in env_config.items():
            merged[field] = value
            origin[field] = "env"

        # Step 4: programmatic overrides
        for field, value in (programmatic or {}).items():
            if field in merged:
                merged[field] = value
                origin[field] = "programmatic"

        try:
            final = DuplicateRecordSettings(**merged).to_dict()
        except Exception as e:
            raise ValueError(f"Configuration validation failed: {e}") from e

        return ResolvedConfig(**final, origin=origin)
