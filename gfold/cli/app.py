from __future__ import annotations

from pathlib import Path

import typer

from gfold import __version__
from gfold.cli.context import CLIContext, build_context
from gfold.core.config import Config, parse_color_mode, parse_display_mode
from gfold.core.errors import ErrorCode
from gfold.core.result import Err, Ok
from gfold.git.collector import collect, get_summary
from gfold.output.console import RichConsole
from gfold.output.display import DisplayHarness
from gfold.output.errors import collection_exit_code, print_collect_error, print_resolve_errors

HELP = """\
Keep track of multiple Git repositories.

Scans PATH (default: the current working directory) for Git working trees
and reports the branch, status (bare, clean, unclean, unpushed) and remote
URL of each one. Nothing is fetched: "unpushed" is judged against the
remote-tracking refs already present locally.

Options given here take priority over the optional config file at
$HOME/.config/gfold.toml. Set GFOLD_LOG=debug (or pass -vv) to investigate
unexpected results.
"""

app = typer.Typer(
    add_completion=False,
    rich_markup_mode="rich",
)


def _fail(ctx: CLIContext, message: str, code: ErrorCode) -> typer.Exit:
    ctx.console.error(message)
    return typer.Exit(code=int(code))


def _merge_options(
    ctx: CLIContext,
    *,
    path: Path | None,
    display_mode: str | None,
    color_mode: str | None,
    jobs: int | None,
    fail_fast: bool,
    follow_symlinks: bool,
) -> Config:
    """Apply command line options on top of the loaded config."""
    config = ctx.config

    if display_mode is not None:
        match parse_display_mode(display_mode):
            case Ok(mode):
                config = config.with_overrides(display_mode=mode)
            case Err(e):
                raise _fail(ctx, e.message, ErrorCode.USER_ERROR)

    if color_mode is not None:
        match parse_color_mode(color_mode):
            case Ok(mode):
                config = config.with_overrides(color_mode=mode)
            case Err(e):
                raise _fail(ctx, e.message, ErrorCode.USER_ERROR)

    target = path if path is not None else config.path
    try:
        root = (Path.cwd() / target.expanduser()) if target is not None else Path.cwd()
        root = root.resolve()
    except OSError as e:
        raise _fail(ctx, f"invalid path: {e}", ErrorCode.USER_ERROR)

    return config.with_overrides(
        path=root,
        max_workers=jobs,
        fail_fast=True if fail_fast else None,
        follow_symlinks=True if follow_symlinks else None,
    )


@app.command(help=HELP)
def run(
    path: Path | None = typer.Argument(
        None,
        help="Directory to scan (defaults to the current working directory)",
        show_default=False,
    ),
    display_mode: str | None = typer.Option(
        None,
        "--display-mode",
        "-d",
        help="Display format: standard (or default), classic, json",
    ),
    color_mode: str | None = typer.Option(
        None,
        "--color-mode",
        "-c",
        help="Color mode: always, compatibility, never",
    ),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        help="Print the merged config (config file + options) as TOML and exit",
    ),
    ignore_config_file: bool = typer.Option(
        False, "--ignore-config-file", "-i", help="Ignore config file settings"
    ),
    fail_fast: bool = typer.Option(
        False, "--fail-fast", help="Stop at the first repository that cannot be resolved"
    ),
    jobs: int | None = typer.Option(
        None, "--jobs", "-j", min=1, help="Number of worker threads"
    ),
    follow_symlinks: bool = typer.Option(
        False, "--follow-symlinks", help="Descend into symlinked directories"
    ),
    verbose: int = typer.Option(
        0, "--verbose", "-v", count=True, help="More logging (-v info, -vv debug)"
    ),
    version: bool = typer.Option(False, "--version", help="Show version and exit."),
) -> None:
    if version:
        typer.echo(__version__)
        raise typer.Exit(code=int(ErrorCode.OK))

    ctx = build_context(ignore_config_file=ignore_config_file, verbosity=verbose)
    config = _merge_options(
        ctx,
        path=path,
        display_mode=display_mode,
        color_mode=color_mode,
        jobs=jobs,
        fail_fast=fail_fast,
        follow_symlinks=follow_symlinks,
    )
    ctx.logger.debug("finalized config options")

    if dry_run:
        typer.echo(config.to_toml(), nl=False)
        raise typer.Exit(code=int(ErrorCode.OK))

    console = RichConsole(config.color_mode)
    root = config.path or Path.cwd()
    result = collect(
        root,
        include_email=config.display_mode.include_email,
        include_submodules=config.display_mode.include_submodules,
        max_workers=config.max_workers,
        fail_fast=config.fail_fast,
        follow_symlinks=config.follow_symlinks,
        logger=ctx.logger,
    )
    match result:
        case Err(e):
            print_collect_error(e, console)
            raise typer.Exit(code=int(ErrorCode.SCAN_ERROR))
        case Ok(collection):
            pass

    DisplayHarness(config.display_mode, config.color_mode).run(collection)
    ctx.logger.info("summary: %s", get_summary(collection))
    print_resolve_errors(collection, console)
    raise typer.Exit(code=collection_exit_code(collection))


def main() -> None:
    app()
