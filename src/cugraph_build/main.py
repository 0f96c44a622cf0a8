#!/usr/bin/env python3
"""
cugraph-build Main Entry Point

Command-line interface for building, installing and cleaning the libcugraph,
libcugraph_etl, pylibcugraph and cugraph packages of a cuGraph checkout.
"""

import logging
import sys
from typing import List

import typer
from rich.console import Console
from typer.core import TyperCommand

from .config import BuildConfig, RepoLayout
from .exceptions import BuildError, InvalidOptionError
from .integrations import ProcessRunner
from .options import parse_invocation, render_help, wants_help
from .orchestrator import BuildOrchestrator
from .utils.json_logger import configure_logging

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="cugraph-build",
    help="Build Orchestrator for the cuGraph Repository",
    add_completion=False,
)
console = Console()

# Targets and flags are validated against a closed vocabulary here rather than
# by click, so help can short-circuit even when other tokens are invalid.
RAW_ARGS = {
    "allow_extra_args": True,
    "ignore_unknown_options": True,
    "help_option_names": [],
}


class RawArgsCommand(TyperCommand):
    """Keeps the untouched argument list, since click drops a bare ``--``."""

    def parse_args(self, ctx, args):
        ctx.meta["raw_args"] = list(args)
        return super().parse_args(ctx, args)


# Cross-platform safe success/failure symbols (avoid Unicode on legacy Windows)
def _symbol(ok: bool) -> str:
    enc = (getattr(sys.stdout, "encoding", None) or "").lower()
    if "utf" in enc:
        return "✓" if ok else "✗"
    return "OK" if ok else "FAIL"


@app.command(cls=RawArgsCommand, context_settings=RAW_ARGS)
def build(ctx: typer.Context) -> None:
    """Build and install the cuGraph components (see -h for targets and flags)."""
    tokens: List[str] = list(ctx.meta.get("raw_args", ctx.args))

    if wants_help(tokens):
        layout = RepoLayout.from_env()
        console.print(
            render_help(ctx.info_name or "cugraph-build", layout.libcugraph_build_dir),
            markup=False,
            highlight=False,
            soft_wrap=True,
        )
        raise typer.Exit(code=0)

    try:
        invocation = parse_invocation(tokens)
        config = BuildConfig.from_env().with_flags(invocation.flags)
    except InvalidOptionError as e:
        console.print(str(e), markup=False, highlight=False)
        raise typer.Exit(code=1)
    except BuildError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(code=1)

    configure_logging(config.log_level, config.log_format)
    logger.debug("Build configuration: %s", config.to_dict())
    if config.dry_run:
        console.print("[yellow]DRY RUN mode - commands are logged, not executed[/yellow]")

    orchestrator = BuildOrchestrator(
        config,
        invocation,
        runner=ProcessRunner(dry_run=config.dry_run),
        console=console,
    )
    result = orchestrator.run()
    if not result.success:
        console.print(f"[red]{_symbol(False)} Build failed: {result.error}[/red]")
        raise typer.Exit(code=1)

    console.print(
        f"[green]{_symbol(True)} Completed: "
        f"{', '.join(result.stages_completed) or 'nothing to do'}[/green]"
    )


def main() -> None:
    app()


if __name__ == "__main__":
    main()
