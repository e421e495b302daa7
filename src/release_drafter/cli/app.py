"""Command line entry point."""

from __future__ import annotations

import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler

from release_drafter import __version__
from release_drafter.cli.commands.draft import run_draft
from release_drafter.config import load_config
from release_drafter.core.models import ReleaseOverrides
from release_drafter.core.references import is_triggerable_reference, short_ref
from release_drafter.exceptions import ReleaseDrafterError

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
    help="Draft your next release notes as pull requests are merged.",
)

console = Console()
err_console = Console(stderr=True)


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=verbose, markup=False)],
        force=True,
    )
    # urllib3 logs every retry at DEBUG
    logging.getLogger("urllib3").setLevel(logging.WARNING)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit()


@app.callback()
def _main(
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    configure_logging(verbose)


@app.command()
def draft(
    path: str | None = typer.Option(None, "--path", help="Project directory (defaults to cwd)."),
    repository: str | None = typer.Option(
        None, "--repo", help="Repository as owner/name (defaults to $GITHUB_REPOSITORY)."
    ),
    ref: str | None = typer.Option(
        None, "--ref", help="Git ref to draft for (defaults to $GITHUB_REF)."
    ),
    config_file: str | None = typer.Option(
        None, "--config", "-c", help="Config file (defaults to .github/release-drafter.toml)."
    ),
    token: str | None = typer.Option(
        None, "--token", envvar="GITHUB_TOKEN", help="GitHub token.", show_default=False
    ),
    version_override: str | None = typer.Option(
        None, "--release-version", help="Force the release version."
    ),
    tag: str | None = typer.Option(None, "--tag", help="Force the release tag."),
    name: str | None = typer.Option(None, "--name", help="Force the release name."),
    prerelease: bool | None = typer.Option(
        None, "--prerelease/--no-prerelease", help="Mark the release as a prerelease."
    ),
    publish: bool = typer.Option(
        False, "--publish", help="Publish the release instead of keeping it as a draft."
    ),
    dry_run: bool = typer.Option(
        False, "--dry-run", help="Render the release without creating or updating it."
    ),
) -> None:
    """Create or update the draft release for a ref."""
    overrides = ReleaseOverrides(
        version=version_override,
        tag=tag,
        name=name,
        prerelease=prerelease,
        publish=True if publish else None,
    )
    try:
        run_draft(
            path=path,
            repository=repository,
            ref=ref,
            config_file=config_file,
            token=token,
            overrides=overrides,
            dry_run=dry_run,
            console=console,
            err_console=err_console,
        )
    except SystemExit as e:
        raise typer.Exit(code=e.code if isinstance(e.code, int) else 1) from e


@app.command("check-ref")
def check_ref(
    ref: str = typer.Argument(..., help="Ref to test, e.g. refs/heads/main."),
    path: str | None = typer.Option(None, "--path", help="Project directory (defaults to cwd)."),
    config_file: str | None = typer.Option(None, "--config", "-c", help="Config file."),
) -> None:
    """Check whether a ref would trigger drafting."""
    try:
        config = load_config(
            Path(path) if path else Path.cwd(),
            Path(config_file) if config_file else None,
        )
    except ReleaseDrafterError as e:
        err_console.print(f"[red]Error loading config:[/] {e}")
        raise typer.Exit(code=1) from e

    if is_triggerable_reference(ref, config.references):
        console.print(f"[green]✓[/] {short_ref(ref)} triggers drafting")
        return
    console.print(f"[yellow]✗[/] {short_ref(ref)} does not match: {', '.join(config.references)}")
    raise typer.Exit(code=1)


def main() -> None:
    app(prog_name="release-drafter")


if __name__ == "__main__":
    main()
