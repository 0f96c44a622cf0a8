"""
Unit tests for BuildOrchestrator stage ordering and failure handling.
"""

from dataclasses import replace
from unittest.mock import patch

from rich.console import Console

from cugraph_build.options import parse_invocation
from cugraph_build.orchestrator import BuildOrchestrator

from conftest import FakeRunner


def make(config, tokens, runner):
    inv = parse_invocation(tokens)
    return BuildOrchestrator(
        config.with_flags(inv.flags), inv, runner=runner, console=Console(quiet=True)
    )


class TestPlannedStages:
    def test_default(self, config, fake_runner):
        assert make(config, [], fake_runner).planned_stages() == [
            "libcugraph",
            "libcugraph_etl",
            "pylibcugraph",
            "cugraph",
        ]

    def test_fixed_order_regardless_of_invocation_order(self, config, fake_runner):
        stages = make(config, ["cugraph", "docs", "clean"], fake_runner).planned_stages()
        assert stages == ["uninstall", "clean", "docs", "cugraph"]

    def test_all(self, config, fake_runner):
        stages = make(config, ["all"], fake_runner).planned_stages()
        assert stages[0] == "docs"
        assert len(stages) == 5

    def test_uninstall_only(self, config, fake_runner):
        assert make(config, ["uninstall"], fake_runner).planned_stages() == ["uninstall"]


class TestRun:
    def test_success_reports_completed_stages(self, config, fake_runner):
        result = make(config, ["libcugraph", "pylibcugraph"], fake_runner).run()
        assert result.success
        assert result.stages_completed == ["libcugraph", "pylibcugraph"]
        assert result.execution_time is not None

    def test_fail_fast(self, config):
        runner = FakeRunner(fail_when=lambda argv: "-S" in argv and argv[2].endswith("libcugraph_etl"))
        result = make(config, [], runner).run()
        assert not result.success
        assert result.stages_completed == ["libcugraph"]
        assert result.error.startswith("libcugraph_etl:")
        assert len(runner.commands) == 3

    def test_uninstall_failure_does_not_stop_build(self, config):
        runner = FakeRunner(fail_when=lambda argv: "uninstall" in argv)
        result = make(config, ["uninstall", "libcugraph"], runner).run()
        assert result.success
        assert result.stages_completed == ["uninstall", "libcugraph"]

    def test_clean_target_flag_wipes_only_selected_build_dir(self, config, fake_runner):
        lib_dir = config.layout.libcugraph_build_dir
        etl_dir = config.layout.libcugraph_etl_build_dir
        (lib_dir / "stale").mkdir(parents=True)
        (etl_dir / "stale").mkdir(parents=True)

        result = make(config, ["libcugraph", "--clean"], fake_runner).run()

        assert result.success
        assert not (lib_dir / "stale").exists()
        assert (etl_dir / "stale").exists()

    def test_docs_failure_stops_before_build(self, config, fake_runner):
        (config.layout.version_file).unlink()
        result = make(config, ["all"], fake_runner).run()
        assert not result.success
        assert result.stages_completed == []
        assert fake_runner.commands == []

    def test_default_runner_honours_dry_run(self, config):
        orchestrator = BuildOrchestrator(
            replace(config, dry_run=True), parse_invocation([]), console=Console(quiet=True)
        )
        assert orchestrator.runner.dry_run is True
        with patch("cugraph_build.integrations.process.subprocess.run") as run:
            assert orchestrator.run().success
        run.assert_not_called()
