"""pip integration for installing and removing the Python packages."""

import logging
import sys
from typing import Dict, List, Sequence

from ..config import BuildConfig
from ..options import Target
from .process import CommandResult, ProcessRunner, ToolError

logger = logging.getLogger(__name__)

# Every distribution a prior build of this repository may have installed.
INSTALLED_PACKAGES = (
    "pylibcugraph",
    "cugraph",
    "cugraph-service-client",
    "cugraph-service-server",
    "cugraph-dgl",
    "cugraph-pyg",
    "cugraph-equivariant",
    "nx-cugraph",
)


class PipAdapter:
    """Adapter for the Python package manager."""

    def __init__(self, runner: ProcessRunner, config: BuildConfig, python: str = sys.executable):
        self.runner = runner
        self.config = config
        self.python = python

    def install_args(self, target: Target) -> List[str]:
        args = [self.python, "-m", "pip", "install", "--no-build-isolation", "--no-deps"]
        if self.config.python_editable:
            args.append("-e")
        args.append(str(self.config.layout.source_dir(target)))
        return args

    def install_env(self) -> Dict[str, str]:
        """Environment passed to scikit-build while compiling the extensions."""
        cfg = self.config
        cmake_args = [
            f"-DCMAKE_LIBRARY_PATH={cfg.layout.libcugraph_build_dir}",
            f"-DCMAKE_CUDA_ARCHITECTURES={cfg.cuda_architectures}",
            f"-DCMAKE_BUILD_TYPE={cfg.build_type}",
        ]
        if cfg.install_prefix:
            cmake_args.insert(0, f"-DCMAKE_PREFIX_PATH={cfg.install_prefix}")
        return {
            "SKBUILD_CMAKE_ARGS": ";".join(cmake_args),
            "CMAKE_BUILD_PARALLEL_LEVEL": str(cfg.parallel_level),
        }

    def install(self, target: Target) -> CommandResult:
        """Build and install a Python package from the source tree."""
        logger.info(
            "Installing %s%s",
            target.value,
            " (editable)" if self.config.python_editable else "",
            extra={"target": target.value},
        )
        return self.runner.run(
            self.install_args(target),
            cwd=str(self.config.layout.repo_dir),
            env=self.install_env(),
        )

    def uninstall(self, packages: Sequence[str] = INSTALLED_PACKAGES) -> bool:
        """Remove previously installed packages.

        Best effort: a failing pip is logged and reported through the return
        value instead of aborting the run.
        """
        args = [self.python, "-m", "pip", "uninstall", "-y", *packages]
        try:
            result = self.runner.run(args, check=False)
        except ToolError as exc:
            logger.warning("Uninstall skipped: %s", exc)
            return False
        if not result.ok:
            logger.warning("pip uninstall exited with code %d, continuing", result.code)
        return result.ok
