#!/usr/bin/env python3
"""
cuGraph Build Orchestrator

Runs the requested stages in a fixed order: uninstall/clean, docs, then the
native and Python package builds. Every stage after cleanup is fail-fast.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import List, Optional

from rich.console import Console

from .cleaner import Cleaner
from .config import BuildConfig
from .exceptions import BuildError
from .integrations import CMakeAdapter, DocsBuilder, PipAdapter, ProcessRunner
from .options import Invocation, Target
from .utils.json_logger import stage_logger

logger = logging.getLogger(__name__)

NATIVE_TARGETS = (Target.LIBCUGRAPH, Target.LIBCUGRAPH_ETL)


@dataclass
class BuildResult:
    """Result from a build run."""

    success: bool
    error: Optional[str] = None
    stages_completed: List[str] = field(default_factory=list)
    execution_time: Optional[float] = None


class BuildOrchestrator:
    """Drives the external tools for one validated invocation."""

    def __init__(
        self,
        config: BuildConfig,
        invocation: Invocation,
        runner: Optional[ProcessRunner] = None,
        console: Optional[Console] = None,
    ):
        self.config = config
        self.invocation = invocation
        self.runner = runner or ProcessRunner(dry_run=config.dry_run)
        self.console = console or Console()
        self.cleaner = Cleaner(config)
        self.cmake = CMakeAdapter(self.runner, config)
        self.pip = PipAdapter(self.runner, config)
        self.docs = DocsBuilder(self.runner, config)

    def planned_stages(self) -> List[str]:
        inv = self.invocation
        stages = []
        if inv.wants_uninstall:
            stages.append(Target.UNINSTALL.value)
        if inv.wants_clean:
            stages.append(Target.CLEAN.value)
        if inv.wants_docs:
            stages.append(Target.DOCS.value)
        stages += [t.value for t in inv.selected_builds()]
        return stages

    def run(self) -> BuildResult:
        """Execute every planned stage, stopping at the first failure."""
        start = time.time()
        result = BuildResult(success=True)
        stages = self.planned_stages()
        logger.debug("Planned stages: %s", ", ".join(stages) or "none")

        for stage in stages:
            self.console.print(f"[cyan]==> {stage}[/cyan]")
            try:
                self._run_stage(stage)
            except BuildError as e:
                stage_logger(logger, stage).error("Stage failed: %s", e)
                result.success = False
                result.error = f"{stage}: {e}"
                break
            result.stages_completed.append(stage)

        result.execution_time = time.time() - start
        return result

    def _run_stage(self, stage: str) -> None:
        if stage == Target.UNINSTALL.value:
            self.uninstall()
        elif stage == Target.CLEAN.value:
            self.cleaner.clean()
        elif stage == Target.DOCS.value:
            self.docs.build()
        else:
            self.build(Target(stage))

    def uninstall(self) -> None:
        """Remove files and packages from a prior install. Never fails."""
        self.cleaner.remove_installed_files()
        self.pip.uninstall()

    def build(self, target: Target) -> None:
        if self.config.clean_targets:
            self.cleaner.clean_build_dirs([self.config.layout.build_dir(target)])
        if target in NATIVE_TARGETS:
            self.cmake.build(target)
        else:
            self.pip.install(target)
