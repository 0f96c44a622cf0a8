"""
Unit tests for Cleaner: install manifests, build dirs and in-place artifacts.
"""

from dataclasses import replace
from pathlib import Path
from unittest.mock import patch

from cugraph_build.cleaner import Cleaner, empty_dir


class TestBuildDirs:
    def test_clean_without_build_dirs_is_noop(self, config):
        Cleaner(config).clean()
        assert config.layout.repo_dir.is_dir()

    def test_clean_removes_build_dir(self, config):
        build_dir = config.layout.libcugraph_build_dir
        (build_dir / "CMakeFiles" / "deep").mkdir(parents=True)
        (build_dir / "CMakeCache.txt").write_text("cache")

        Cleaner(config).clean()

        assert not build_dir.exists()
        assert (config.layout.repo_dir / "cpp").is_dir()

    def test_mounted_dir_keeps_itself_but_loses_contents(self, config):
        build_dir = config.layout.libcugraph_build_dir
        (build_dir / "obj").mkdir(parents=True)
        (build_dir / "libcugraph.so").write_text("elf")

        with patch.object(Path, "rmdir", side_effect=OSError("Device or resource busy")):
            Cleaner(config).clean_build_dirs()

        assert build_dir.is_dir()
        assert list(build_dir.iterdir()) == []

    def test_empty_dir_on_missing_path(self, tmp_path):
        empty_dir(tmp_path / "missing")

    def test_dry_run_leaves_files(self, config):
        build_dir = config.layout.libcugraph_build_dir
        build_dir.mkdir(parents=True)
        Cleaner(replace(config, dry_run=True)).clean()
        assert build_dir.is_dir()


class TestPythonArtifacts:
    def test_generated_files_removed_sources_kept(self, config):
        python_dir = config.layout.python_dir
        pkg = python_dir / "cugraph" / "cugraph"
        (pkg / "__pycache__").mkdir(parents=True)
        (pkg / "__pycache__" / "graph.cpython-310.pyc").write_text("")
        (pkg / "graph.pyx").write_text("# cython")
        (pkg / "graph.cpp").write_text("// generated")
        (pkg / "graph.cpython-310-x86_64-linux-gnu.so").write_text("")
        (python_dir / "cugraph.egg-info").mkdir()
        (python_dir / "dist").mkdir()
        (python_dir / "pylibcugraph" / "_skbuild" / "linux").mkdir(parents=True)

        cleaner = Cleaner(config)
        assert cleaner.python_artifacts()
        cleaner.clean_python_dir()

        assert (pkg / "graph.pyx").is_file()
        assert not (pkg / "__pycache__").exists()
        assert not (pkg / "graph.cpp").exists()
        assert not (pkg / "graph.cpython-310-x86_64-linux-gnu.so").exists()
        assert not (python_dir / "cugraph.egg-info").exists()
        assert not (python_dir / "dist").exists()
        assert not (python_dir / "pylibcugraph" / "_skbuild").exists()

    def test_no_python_dir(self, config):
        cleaner = Cleaner(replace(config, layout=replace(config.layout, repo_dir=Path("/nonexistent/cugraph"))))
        assert cleaner.python_artifacts() == []


class TestInstallManifest:
    def test_listed_files_are_removed(self, config, tmp_path):
        prefix = tmp_path / "prefix" / "lib"
        prefix.mkdir(parents=True)
        installed = [prefix / "libcugraph.so", prefix / "libcugraph_c.so"]
        for path in installed:
            path.write_text("elf")
        build_dir = config.layout.libcugraph_build_dir
        build_dir.mkdir(parents=True)
        manifest_lines = [str(p) for p in installed] + [str(prefix / "already_gone.so"), ""]
        (build_dir / "install_manifest.txt").write_text("\n".join(manifest_lines))

        removed = Cleaner(config).remove_installed_files()

        assert removed == 2
        assert not any(p.exists() for p in installed)

    def test_no_manifest(self, config):
        assert Cleaner(config).remove_installed_files() == 0
