"""Public entry point for settings resolution."""

from pathlib import Path
from typing import Any

from .resolver import ConfigResolver
from .types import FrozenConfig, ResolvedConfig

_resolver = ConfigResolver()


def resolve_config(
    programmatic: dict[str, Any] | None = None,
    *,
    use_env_file: str | Path | None = None,
    project_root: Path | None = None,
    explain: bool = False,
) -> FrozenConfig | ResolvedConfig:
    """Resolve settings from all sources with proper precedence.

    Programmatic > Environment > Project file > Defaults

    Args:
        programmatic: Overrides with the highest precedence. Unknown keys
            are ignored.
        use_env_file: Optional path to a .env file read before the environment.
        project_root: Directory to search for pyproject.toml.
        explain: Return the ResolvedConfig (with origins) instead of the
            frozen settings.

    Returns:
        FrozenConfig, or ResolvedConfig when `explain` is true.

    Example:
        config = resolve_config({"identifier_field": "uuid"})
    """
    resolved = _resolver.resolve(
        programmatic, use_env_file=use_env_file, project_root=project_root
    )
    return resolved if explain else resolved.to_frozen()
