"""
Build configuration for the cuGraph build orchestrator.

The configuration is built once per invocation from hardcoded defaults,
environment variable overrides and finally flag overrides, and is read-only
afterwards.
"""

import os
import re
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Callable, Dict, Iterable, Mapping, Optional, Tuple

from .exceptions import ConfigError
from .options import Flag, Target

_TRUTHY = ("1", "true", "yes", "on")
_VERSION_RE = re.compile(r"^(\d+)\.(\d+)")


def _cpu_count() -> int:
    return os.cpu_count() or 1


@dataclass(frozen=True)
class RepoLayout:
    """Directory paths of the cuGraph source tree."""

    repo_dir: Path
    libcugraph_build_dir: Path
    libcugraph_etl_build_dir: Path

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "RepoLayout":
        env = os.environ if env is None else env
        repo_dir = Path(env.get("CUGRAPH_REPO_DIR") or os.getcwd()).resolve()
        return cls(
            repo_dir=repo_dir,
            libcugraph_build_dir=Path(
                env.get("LIBCUGRAPH_BUILD_DIR") or repo_dir / "cpp" / "build"
            ),
            libcugraph_etl_build_dir=Path(
                env.get("LIBCUGRAPH_ETL_BUILD_DIR")
                or repo_dir / "cpp" / "libcugraph_etl" / "build"
            ),
        )

    @property
    def cpp_dir(self) -> Path:
        return self.repo_dir / "cpp"

    @property
    def python_dir(self) -> Path:
        return self.repo_dir / "python"

    @property
    def docs_dir(self) -> Path:
        return self.repo_dir / "docs" / "cugraph"

    @property
    def version_file(self) -> Path:
        return self.repo_dir / "VERSION"

    def source_dir(self, target: Target) -> Path:
        return {
            Target.LIBCUGRAPH: self.cpp_dir,
            Target.LIBCUGRAPH_ETL: self.cpp_dir / "libcugraph_etl",
            Target.PYLIBCUGRAPH: self.python_dir / "pylibcugraph",
            Target.CUGRAPH: self.python_dir / "cugraph",
        }[target]

    def build_dir(self, target: Target) -> Path:
        return {
            Target.LIBCUGRAPH: self.libcugraph_build_dir,
            Target.LIBCUGRAPH_ETL: self.libcugraph_etl_build_dir,
            Target.PYLIBCUGRAPH: self.python_dir / "pylibcugraph" / "_skbuild",
            Target.CUGRAPH: self.python_dir / "cugraph" / "_skbuild",
        }[target]

    @property
    def native_build_dirs(self) -> Tuple[Path, ...]:
        return (self.libcugraph_build_dir, self.libcugraph_etl_build_dir)

    @property
    def build_dirs(self) -> Tuple[Path, ...]:
        """Every directory removed by the ``clean`` target."""
        service = self.python_dir / "cugraph-service"
        return (
            self.libcugraph_build_dir,
            self.libcugraph_etl_build_dir,
            self.build_dir(Target.PYLIBCUGRAPH),
            self.build_dir(Target.CUGRAPH),
            service / "server" / "build",
            service / "client" / "build",
            self.python_dir / "cugraph-dgl" / "build",
        )


def read_short_version(version_file: Path) -> str:
    """Return the ``MAJOR.MINOR`` part of the version stored in ``version_file``."""
    try:
        text = version_file.read_text().strip()
    except OSError as exc:
        raise ConfigError(f"Cannot read version file {version_file}: {exc}") from exc
    match = _VERSION_RE.match(text)
    if not match:
        raise ConfigError(f"Unrecognized version {text!r} in {version_file}")
    return f"{match.group(1)}.{match.group(2)}"


@dataclass(frozen=True)
class BuildConfig:
    """Immutable settings shared by every build stage."""

    layout: RepoLayout
    build_type: str = "Release"
    verbose: bool = False
    install: bool = True
    clean_targets: bool = False
    build_cpp_tests: bool = True
    build_cpp_mg_tests: bool = False
    build_cpp_mtmg_tests: bool = False
    build_all_gpu_arch: bool = False
    with_cugraphops: bool = True
    python_editable: bool = False
    parallel_level: int = field(default_factory=_cpu_count)
    install_prefix: Optional[str] = None
    build_abi: str = "ON"
    dry_run: bool = False
    log_level: str = "INFO"
    log_format: str = "text"

    @property
    def cuda_architectures(self) -> str:
        return "RAPIDS" if self.build_all_gpu_arch else "NATIVE"

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "BuildConfig":
        """Create config from defaults overridden by environment variables."""
        env = os.environ if env is None else env
        overrides: Dict[str, object] = {}

        prefix = env.get("PREFIX") or env.get("CONDA_PREFIX")
        if prefix:
            overrides["install_prefix"] = prefix

        parallel = env.get("PARALLEL_LEVEL")
        if parallel:
            try:
                level = int(parallel)
            except ValueError:
                level = 0
            if level < 1:
                raise ConfigError(
                    f"PARALLEL_LEVEL must be a positive integer, got {parallel!r}"
                )
            overrides["parallel_level"] = level

        if env.get("BUILD_ABI"):
            overrides["build_abi"] = env["BUILD_ABI"]
        if env.get("CUGRAPH_BUILD_DRY_RUN"):
            overrides["dry_run"] = env["CUGRAPH_BUILD_DRY_RUN"].lower() in _TRUTHY
        if env.get("CUGRAPH_BUILD_LOG_LEVEL"):
            overrides["log_level"] = env["CUGRAPH_BUILD_LOG_LEVEL"].upper()
        if env.get("CUGRAPH_BUILD_LOG_FORMAT"):
            overrides["log_format"] = env["CUGRAPH_BUILD_LOG_FORMAT"].lower()

        return cls(layout=RepoLayout.from_env(env), **overrides)

    def with_flags(self, flags: Iterable[Flag]) -> "BuildConfig":
        """Apply flag overrides in :class:`Flag` declaration order."""
        present = set(flags)
        config = self
        for flag, override in FLAG_OVERRIDES.items():
            if flag in present:
                config = override(config)
        return config

    def to_dict(self) -> Dict[str, object]:
        return {
            "repo_dir": str(self.layout.repo_dir),
            "build_type": self.build_type,
            "verbose": self.verbose,
            "install": self.install,
            "clean_targets": self.clean_targets,
            "build_cpp_tests": self.build_cpp_tests,
            "build_cpp_mtmg_tests": self.build_cpp_mtmg_tests,
            "build_all_gpu_arch": self.build_all_gpu_arch,
            "with_cugraphops": self.with_cugraphops,
            "python_editable": self.python_editable,
            "parallel_level": self.parallel_level,
            "install_prefix": self.install_prefix,
            "build_abi": self.build_abi,
            "dry_run": self.dry_run,
        }


FLAG_OVERRIDES: Dict[Flag, Callable[[BuildConfig], BuildConfig]] = {
    Flag.VERBOSE: lambda c: replace(c, verbose=True),
    Flag.DEBUG: lambda c: replace(c, build_type="Debug"),
    Flag.NO_INSTALL: lambda c: replace(c, install=False),
    Flag.CLEAN_TARGET: lambda c: replace(c, clean_targets=True),
    Flag.ALL_GPU_ARCH: lambda c: replace(c, build_all_gpu_arch=True),
    Flag.SKIP_CPP_TESTS: lambda c: replace(c, build_cpp_tests=False),
    Flag.WITHOUT_CUGRAPHOPS: lambda c: replace(c, with_cugraphops=False),
    Flag.CPP_MTMG_TESTS: lambda c: replace(c, build_cpp_mtmg_tests=True),
    Flag.PYDEVELOP: lambda c: replace(c, python_editable=True),
}
