"""Process execution utilities for the external build tools."""

from __future__ import annotations

import logging
import os
import shlex
import subprocess
import time
from dataclasses import dataclass

from ..exceptions import BuildError

logger = logging.getLogger(__name__)


@dataclass
class CommandResult:
    """Result of executing a command."""

    code: int
    duration_s: float
    argv: list[str]
    cwd: str | None = None
    env: dict[str, str] | None = None

    @property
    def ok(self) -> bool:
        return self.code == 0


class ToolError(BuildError):
    """Raised when an external tool is missing or exits non-zero."""

    def __init__(self, message: str, code: int | None = None) -> None:
        super().__init__(message)
        self.code = code


class ProcessRunner:
    """Runs external tools with their output streamed to the terminal.

    Build tools are long running and their progress is the user's main
    feedback, so output is inherited rather than captured.
    """

    def __init__(self, dry_run: bool = False, timeout_s: float | None = None) -> None:
        self.dry_run = dry_run
        self.timeout_s = timeout_s

    def run(
        self,
        argv: list[str],
        cwd: str | None = None,
        env: dict[str, str] | None = None,
        check: bool = True,
    ) -> CommandResult:
        """Execute a command and return structured results.

        ``env`` entries are layered on top of the current process environment.
        With ``check`` set, a non-zero exit raises :class:`ToolError`.
        """
        cmd = [str(a) for a in argv]
        cmd_str = " ".join(map(shlex.quote, cmd))
        logger.info("%sRunning: %s", "[DRY RUN] " if self.dry_run else "", cmd_str)
        start = time.time()

        if self.dry_run:
            return CommandResult(code=0, duration_s=0.0, argv=cmd, cwd=cwd, env=env)

        proc_env = os.environ.copy()
        if env:
            proc_env.update(env)

        try:
            completed = subprocess.run(
                cmd,
                cwd=cwd,
                env=proc_env,
                timeout=self.timeout_s,
                shell=False,
            )
        except subprocess.TimeoutExpired as exc:  # pragma: no cover
            raise ToolError(f"Command timed out: {cmd_str}") from exc
        except FileNotFoundError as exc:
            raise ToolError(f"Command not found: {cmd[0]}") from exc

        res = CommandResult(
            code=completed.returncode,
            duration_s=time.time() - start,
            argv=cmd,
            cwd=cwd,
            env=env,
        )
        logger.debug("Finished in %.1fs with exit code %d", res.duration_s, res.code)

        if check and not res.ok:
            raise ToolError(f"Command failed ({res.code}): {cmd_str}", code=res.code)
        return res
