"""
mediarun — entry point.

Resolves the mount for the given location, asks for consent, and on
approval replaces this process with the medium's autorun program.

Every outcome exits with status 0, including usage and lookup failures.
"""

import logging
from pathlib import Path
from typing import Optional

import click
from rich.console import Console

from mediarun import __version__
from mediarun.config import load_config
from mediarun.errors import MediarunError, MountResolutionError, UsageError
from mediarun.log import setup_logging
from mediarun.ui.theme import MEDIARUN_THEME

logger = logging.getLogger(__name__)


# ── Console (shared across the tool) ─────────────────────────────────────────

console = Console(theme=MEDIARUN_THEME)


# ── CLI ───────────────────────────────────────────────────────────────────────

@click.command(name="mediarun", context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(__version__, "-V", "--version", prog_name="mediarun")
@click.argument("locations", nargs=-1, metavar="MOUNT-URI")
@click.option(
    "--dry-run",
    is_flag=True,
    default=False,
    help="Ask as usual, but only print what would be run.",
)
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log debug details to stderr.")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Read settings from this TOML file instead of ~/.config/mediarun/config.toml.",
)
def cli(
    locations: tuple[str, ...],
    dry_run: bool,
    verbose: bool,
    config_path: Optional[Path],
) -> None:
    """Offer to run the autorun program on a mounted medium.

    MOUNT-URI is a path or file:// URI anywhere inside the mounted volume.
    Looks for .autorun, autorun, then autorun.sh at the volume root.
    """
    setup_logging(verbose)

    try:
        location = _single_location(locations)
    except UsageError as e:
        click.echo(str(e))
        return

    config = load_config(config_path)

    from mediarun.mounts import MountMonitor, find_enclosing_mount

    # Monitor exists before the mount is looked up so no removal is missed
    monitor = MountMonitor()

    try:
        mount = find_enclosing_mount(location)
    except MountResolutionError as e:
        logger.warning("%s", e)
        return

    monitor.watch(mount)
    run_session(mount, monitor, config, dry_run=dry_run)


def _single_location(locations: tuple[str, ...]) -> str:
    if len(locations) != 1:
        raise UsageError("Usage: mediarun mount-uri")
    return locations[0]


# ── Session wiring ────────────────────────────────────────────────────────────

def run_session(mount, monitor, config: dict, dry_run: bool = False, stream=None) -> None:
    """
    Run one consent flow for mount on a fresh Dispatcher.

    Returns once the user answered, the medium was removed, or execution
    failed. On successful execution it never returns.
    """
    from mediarun.dispatch import Dispatcher
    from mediarun.executor import execute
    from mediarun.session import AutorunSession
    from mediarun.ui.prompt import ConsentPrompt

    dispatcher = Dispatcher()
    dispatcher.add_timer(config["poll_interval"], monitor.poll)

    prompt = ConsentPrompt(console, dispatcher, stream=stream)
    session = AutorunSession(
        mount,
        report_error=_report_error,
        on_dismiss=prompt.dismiss,
        executor=_print_plan if dry_run else execute,
        shell=config["shell"],
    )

    try:
        prompt.present(session)
    finally:
        dispatcher.close()


def _report_error(error: MediarunError) -> None:
    from mediarun.ui.report import show_error
    show_error(error, console)


def _print_plan(candidate, cwd: Path) -> None:
    """Dry-run executor: show the command instead of running it."""
    import shlex

    from rich.markup import escape

    console.print()
    console.print(f"  [dim]Would run in[/dim] [command]{escape(str(cwd))}[/command]")
    console.print(f"  [dim]$[/dim]  [command]{escape(shlex.join(candidate.argv))}[/command]")
    console.print("\n  [dim](dry run, nothing was executed)[/dim]\n")


# ── Entry ─────────────────────────────────────────────────────────────────────

if __name__ == "__main__":
    cli()
