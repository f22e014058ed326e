"""Environment variable configuration loading.

Reads DUPLICATE_RECORD_* variables, optionally seeding them from a .env file
first, and coerces the values through the settings schema.
"""

import os
from pathlib import Path
from typing import Any

from .schema import DuplicateRecordSettings

ENV_VARS: dict[str, str] = {
    "DUPLICATE_RECORD_IDENTIFIER_FIELD": "identifier_field",
    "DUPLICATE_RECORD_EXTRA_RELATION_TYPES": "extra_relation_types",
    "DUPLICATE_RECORD_INSTRUCTION_NAME": "instruction_name",
    "DUPLICATE_RECORD_WORKFLOW_PLUGIN_NAME": "workflow_plugin_name",
}


class EnvironmentConfigLoader:
    """Loads configuration from DUPLICATE_RECORD_* environment variables."""

    def load_env_config(self, env_file: str | Path | None = None) -> dict[str, Any]:
        """Load configuration from environment variables.

        Args:
            env_file: Optional path to a .env file whose values are loaded into
                the environment (without overriding existing variables) first.

        Returns:
            Only the fields actually set in the environment, already coerced.

        Raises:
            ValueError: If environment variables contain invalid values.
            FileNotFoundError: If `env_file` does not exist.
        """
        if env_file:
            self._load_env_file(env_file)

        env_values = {
            field_name: os.environ[env_var]
            for env_var, field_name in ENV_VARS.items()
            if env_var in os.environ
        }
        if not env_values:
            return {}

        try:
            settings = DuplicateRecordSettings(**env_values)
        except Exception as e:
            env_var_list = [
                f"{env_var}={os.environ[env_var]}"
                for env_var, field_name in ENV_VARS.items()
                if field_name in env_values
            ]
            raise ValueError(
                f"Invalid environment variable values: {', '.join(env_var_list)}. "
                f"Error: {e}"
            ) from e

        return {field_name: getattr(settings, field_name) for field_name in env_values}

    def _load_env_file(self, env_file: str | Path) -> None:
        """Seed the environment from a .env file; set variables are left alone."""
        env_path = Path(env_file)
        try:
            text = env_path.read_text(encoding="utf-8")
        except FileNotFoundError:
            raise FileNotFoundError(f"Environment file not found: {env_path}") from None
        except OSError as e:
            raise ValueError(f"Failed to read environment file {env_path}: {e}") from e

        pairs = [
            _parse_env_line(raw, lineno)
            for lineno, raw in enumerate(text.splitlines(), 1)
            if raw.strip() and not raw.lstrip().startswith("#")
        ]
        for key, value in pairs:
            os.environ.setdefault(key, value)


def _parse_env_line(raw: str, lineno: int) -> tuple[str, str]:
    """Split `KEY=VALUE` (optionally prefixed with `export`), unquoting VALUE."""
    key, sep, value = raw.strip().removeprefix("export ").partition("=")
    key = key.strip()
    if not sep or not key:
        raise ValueError(f"Line {lineno} of .env file is not KEY=VALUE: {raw.strip()!r}")
    value = value.strip()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
        value = value[1:-1]
    return key, value
