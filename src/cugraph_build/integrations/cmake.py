"""CMake integration for the native libraries."""

import logging
from pathlib import Path
from typing import List

from ..config import BuildConfig
from ..options import Target
from .process import CommandResult, ProcessRunner

logger = logging.getLogger(__name__)


def _on_off(value: bool) -> str:
    return "ON" if value else "OFF"


class CMakeAdapter:
    """Configures, builds and installs libcugraph and libcugraph_etl."""

    def __init__(self, runner: ProcessRunner, config: BuildConfig, cmake: str = "cmake"):
        """Initialize CMake adapter.

        Args:
            runner: ProcessRunner instance
            config: Build configuration shared by all stages
            cmake: Path or name of the cmake executable
        """
        self.runner = runner
        self.config = config
        self.cmake = cmake

    def configure_args(self, target: Target) -> List[str]:
        """Return the ``cmake -S ... -B ...`` command line for ``target``."""
        cfg = self.config
        layout = cfg.layout
        args = [
            self.cmake,
            "-S",
            str(layout.source_dir(target)),
            "-B",
            str(layout.build_dir(target)),
        ]
        if cfg.install_prefix:
            args.append(f"-DCMAKE_INSTALL_PREFIX={cfg.install_prefix}")
        args += [
            f"-DCMAKE_CUDA_ARCHITECTURES={cfg.cuda_architectures}",
            f"-DCMAKE_BUILD_TYPE={cfg.build_type}",
            f"-DBUILD_TESTS={_on_off(cfg.build_cpp_tests)}",
            f"-DBUILD_CUGRAPH_MG_TESTS={_on_off(cfg.build_cpp_mg_tests)}",
            f"-DBUILD_CUGRAPH_MTMG_TESTS={_on_off(cfg.build_cpp_mtmg_tests)}",
            f"-DCMAKE_CXX11_ABI={cfg.build_abi}",
        ]
        if target is Target.LIBCUGRAPH:
            args.append(f"-DUSE_CUGRAPH_OPS={_on_off(cfg.with_cugraphops)}")
        elif target is Target.LIBCUGRAPH_ETL:
            args.append(f"-Dcugraph_ROOT={layout.libcugraph_build_dir}")
        if cfg.verbose:
            args.append("-DCMAKE_VERBOSE_MAKEFILE=ON")
        return args

    def build_args(self, target: Target) -> List[str]:
        """Return the ``cmake --build`` command line for ``target``."""
        cfg = self.config
        args = [
            self.cmake,
            "--build",
            str(cfg.layout.build_dir(target)),
            f"-j{cfg.parallel_level}",
        ]
        if cfg.install:
            args += ["--target", "install"]
        if cfg.verbose:
            args.append("-v")
        return args

    def build(self, target: Target) -> CommandResult:
        """Configure then build (and optionally install) a native target."""
        build_dir: Path = self.config.layout.build_dir(target)
        logger.info(
            "Building %s (%s) in %s",
            target.value,
            self.config.build_type,
            build_dir,
            extra={"target": target.value},
        )
        self.runner.run(self.configure_args(target), cwd=str(self.config.layout.repo_dir))
        return self.runner.run(self.build_args(target), cwd=str(self.config.layout.repo_dir))
