"""Settings for the duplicate-record instruction.

Resolve-once, freeze-then-flow:
- ResolvedConfig: merged settings with the origin of every value
- FrozenConfig: immutable settings handed to the engine
- StepConfig: per-node step configuration parsed from the host
"""

from .api import resolve_config
from .file_loader import ConfigFileError, FileConfigLoader
from .env_loader import EnvironmentConfigLoader
from .resolver import ConfigResolver
from .schema import DuplicateRecordSettings
from .step import OverrideFieldConfig, StepConfig
from .types import ConfigOrigin, FrozenConfig, ResolvedConfig, SourceMap

__all__ = [
    "ConfigFileError",
    "ConfigOrigin",
    "ConfigResolver",
    "DuplicateRecordSettings",
    "EnvironmentConfigLoader",
    "FileConfigLoader",
    "FrozenConfig",
    "OverrideFieldConfig",
    "ResolvedConfig",
    "SourceMap",
    "StepConfig",
    "resolve_config",
]
