"""Plugin entry point: registers the instruction with the host workflow plugin."""

from __future__ import annotations

from functools import partial
import logging
from typing import Any

from duplicate_record.config.types import FrozenConfig
from duplicate_record.core.exceptions import PluginError
from duplicate_record.instruction import DuplicateRecordInstruction

logger = logging.getLogger(__name__)


class WorkflowDuplicateRecordPlugin:
    """Host plugin for the duplicate-record instruction.

    Apart from `load`, the lifecycle hooks are no-ops: the instruction owns no
    schema, settings storage or background work.

    The factory registered with the workflow plugin is called with the
    record store as its first positional argument. A host that builds
    instructions from the workflow plugin itself needs an adapter that
    resolves the store first, e.g.
    `lambda workflow: factory(workflow.store)`.
    """

    def __init__(self, app: Any, pm: Any, config: FrozenConfig | None = None):
        """Initialize with the host application and its plugin manager."""
        self.app = app
        self.pm = pm
        self.config = config or FrozenConfig()

    async def after_add(self) -> None:
        pass

    async def before_load(self) -> None:
        pass

    async def load(self) -> None:
        """Register the instruction under its configured name.

        Raises:
            PluginError: If the workflow plugin is not installed.
        """
        workflow_plugin = self.pm.get(self.config.workflow_plugin_name)
        if workflow_plugin is None:
            raise PluginError(
                f"Workflow plugin is required for {self.config.instruction_name} plugin"
            )
        workflow_plugin.register_instruction(
            self.config.instruction_name,
            partial(DuplicateRecordInstruction, config=self.config),
        )
        log = getattr(self.app, "logger", None) or logger
        log.info("Workflow %s plugin loaded", self.config.instruction_name)

    async def install(self) -> None:
        pass

    async def after_enable(self) -> None:
        pass

    async def after_disable(self) -> None:
        pass

    async def remove(self) -> None:
        pass
