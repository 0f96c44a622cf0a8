"""
Cleanup of installed files and build artifacts.

Everything here is best effort. Missing files are the normal case when the
tree was never built, so ``OSError`` is logged and swallowed rather than
raised.
"""

import logging
import shutil
from pathlib import Path
from typing import Iterable, List, Optional

from .config import BuildConfig

logger = logging.getLogger(__name__)

INSTALL_MANIFEST = "install_manifest.txt"

# Relative to the python/ directory.
PYTHON_TOP_LEVEL_ARTIFACTS = ("dist", "dask-worker-space", "cugraph/raft")
PYTHON_ARTIFACT_DIRS = ("__pycache__", "_skbuild", "dist", "_external_repositories")
PYTHON_ARTIFACT_FILES = ("*.cpp", "*.cpython*.so")


def _remove(path: Path) -> bool:
    try:
        if path.is_dir() and not path.is_symlink():
            shutil.rmtree(path)
        else:
            path.unlink()
    except FileNotFoundError:
        return False
    except OSError as exc:
        logger.debug("Could not remove %s: %s", path, exc, extra={"path": str(path)})
        return False
    return True


def empty_dir(directory: Path) -> None:
    """Delete the contents of ``directory``, then try to delete it too.

    Mounted volumes cannot be removed from inside a container, so failing to
    remove the directory itself is not an error.
    """
    try:
        children = list(directory.iterdir())
    except OSError as exc:
        logger.debug("Cannot list %s: %s", directory, exc)
        return
    for child in children:
        _remove(child)
    try:
        directory.rmdir()
    except OSError as exc:
        logger.debug("Keeping %s: %s", directory, exc, extra={"path": str(directory)})


class Cleaner:
    """Removes what previous builds installed or generated."""

    def __init__(self, config: BuildConfig):
        self.config = config

    def remove_installed_files(self) -> int:
        """Delete every file listed in the native install manifests."""
        removed = 0
        for build_dir in self.config.layout.native_build_dirs:
            manifest = build_dir / INSTALL_MANIFEST
            if not manifest.is_file():
                continue
            try:
                entries = manifest.read_text().splitlines()
            except OSError as exc:
                logger.debug("Cannot read %s: %s", manifest, exc)
                continue
            for entry in filter(None, (line.strip() for line in entries)):
                if self.config.dry_run:
                    logger.info("[DRY RUN] Would remove %s", entry)
                elif _remove(Path(entry)):
                    removed += 1
        logger.info("Removed %d installed files", removed)
        return removed

    def python_artifacts(self) -> List[Path]:
        """Locate in-place generated Python artifacts under ``python/``."""
        python_dir = self.config.layout.python_dir
        if not python_dir.is_dir():
            return []
        found = [python_dir / rel for rel in PYTHON_TOP_LEVEL_ARTIFACTS]
        found += python_dir.glob("*.egg-info")
        for name in PYTHON_ARTIFACT_DIRS:
            found += (p for p in python_dir.rglob(name) if p.is_dir())
        for pattern in PYTHON_ARTIFACT_FILES:
            found += (p for p in python_dir.rglob(pattern) if p.is_file())
        # Parents first, so nested matches vanish with them.
        unique = sorted(set(found), key=lambda p: len(p.parts))
        return [p for p in unique if p.exists() or p.is_symlink()]

    def clean_python_dir(self) -> None:
        for path in self.python_artifacts():
            if self.config.dry_run:
                logger.info("[DRY RUN] Would remove %s", path)
            else:
                _remove(path)

    def clean_build_dirs(self, build_dirs: Optional[Iterable[Path]] = None) -> None:
        if build_dirs is None:
            build_dirs = self.config.layout.build_dirs
        for build_dir in build_dirs:
            if not build_dir.is_dir():
                continue
            logger.info("Cleaning %s", build_dir, extra={"path": str(build_dir)})
            if not self.config.dry_run:
                empty_dir(build_dir)

    def clean(self) -> None:
        """Remove generated Python artifacts and all build directories."""
        self.clean_python_dir()
        self.clean_build_dirs()
