"""Adapters for the external tools driven by the build orchestrator."""

from .cmake import CMakeAdapter
from .docs import DocsBuilder
from .pip import INSTALLED_PACKAGES, PipAdapter
from .process import CommandResult, ProcessRunner, ToolError

__all__ = [
    "CMakeAdapter",
    "CommandResult",
    "DocsBuilder",
    "INSTALLED_PACKAGES",
    "PipAdapter",
    "ProcessRunner",
    "ToolError",
]
