"""
Shared test configuration for cugraph-build.

Provides:
- An isolated environment with none of the build variables set
- A scratch cuGraph checkout layout under ``tmp_path``
- A fake process runner that records commands instead of running them
"""

import logging
from pathlib import Path
from typing import Callable, List, Optional

import pytest

from cugraph_build.config import BuildConfig
from cugraph_build.integrations.process import CommandResult, ToolError

BUILD_ENV_VARS = (
    "CUGRAPH_REPO_DIR",
    "LIBCUGRAPH_BUILD_DIR",
    "LIBCUGRAPH_ETL_BUILD_DIR",
    "PREFIX",
    "CONDA_PREFIX",
    "PARALLEL_LEVEL",
    "BUILD_ABI",
    "CUGRAPH_BUILD_DRY_RUN",
    "CUGRAPH_BUILD_LOG_LEVEL",
    "CUGRAPH_BUILD_LOG_FORMAT",
)


class FakeRunner:
    """Records every command; optionally fails those matching ``fail_when``."""

    def __init__(self, fail_when: Optional[Callable[[List[str]], bool]] = None):
        self.dry_run = False
        self.calls: List[dict] = []
        self.fail_when = fail_when

    def run(self, argv, cwd=None, env=None, check=True) -> CommandResult:
        cmd = [str(a) for a in argv]
        self.calls.append({"argv": cmd, "cwd": cwd, "env": env})
        code = 1 if self.fail_when and self.fail_when(cmd) else 0
        if check and code:
            raise ToolError(f"Command failed ({code}): {' '.join(cmd)}", code=code)
        return CommandResult(code=code, duration_s=0.0, argv=cmd, cwd=cwd, env=env)

    @property
    def commands(self) -> List[List[str]]:
        return [c["argv"] for c in self.calls]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Remove build-related variables inherited from the developer shell."""
    for name in BUILD_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def restore_logging():
    """Drop the stream handlers the CLI installs on the root logger."""
    root = logging.getLogger()
    level = root.level
    yield
    root.handlers = [h for h in root.handlers if type(h) is not logging.StreamHandler]
    root.setLevel(level)


@pytest.fixture
def repo_dir(tmp_path, monkeypatch) -> Path:
    """A minimal cuGraph checkout with the repository root exported."""
    repo = (tmp_path / "cugraph").resolve()
    (repo / "cpp" / "libcugraph_etl").mkdir(parents=True)
    (repo / "python" / "pylibcugraph").mkdir(parents=True)
    (repo / "python" / "cugraph").mkdir(parents=True)
    (repo / "docs" / "cugraph").mkdir(parents=True)
    (repo / "VERSION").write_text("24.02.00\n")
    monkeypatch.setenv("CUGRAPH_REPO_DIR", str(repo))
    return repo


@pytest.fixture
def config(repo_dir) -> BuildConfig:
    return BuildConfig.from_env({"CUGRAPH_REPO_DIR": str(repo_dir), "PARALLEL_LEVEL": "4"})


@pytest.fixture
def fake_runner() -> FakeRunner:
    return FakeRunner()
