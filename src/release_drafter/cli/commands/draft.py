"""Implementation of the 'draft' command.

The draft command renders the next release notes and creates or updates
the draft release on GitHub.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import TYPE_CHECKING
from uuid import uuid4

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from release_drafter.config import load_config
from release_drafter.core.drafter import Drafter
from release_drafter.core.models import ReleaseOverrides
from release_drafter.core.references import is_triggerable_reference
from release_drafter.exceptions import ConfigValidationError, ReleaseDrafterError
from release_drafter.vcs import GitHubClient

if TYPE_CHECKING:
    from rich.console import Console

    from release_drafter.core.drafter import DraftResult


def split_repository(repository: str | None) -> tuple[str, str]:
    """Split ``owner/name``.

    Raises:
        ReleaseDrafterError: If the value is missing or malformed
    """
    if not repository or repository.count("/") != 1:
        raise ReleaseDrafterError(
            f"Repository must be given as owner/name (got {repository!r}). "
            "Use --repo or set GITHUB_REPOSITORY."
        )
    owner, name = repository.split("/")
    if not owner or not name:
        raise ReleaseDrafterError(f"Invalid repository: {repository!r}")
    return owner, name


def print_config_errors(error: ConfigValidationError, err_console: Console) -> None:
    table = Table("Property", "Error", title="Configuration errors", title_style="red")
    for path, message in error.errors:
        table.add_row(path, message)
    err_console.print(table)


def write_action_outputs(result: DraftResult, output_path: Path) -> None:
    """Append GitHub Action outputs in the multi-line ``key<<DELIM`` format."""
    outputs: dict[str, str] = {"body": result.release_info.body}
    release = result.release
    if release is not None:
        outputs["id"] = str(release.id)
        if release.html_url:
            outputs["html_url"] = release.html_url
        if release.upload_url:
            outputs["upload_url"] = release.upload_url
        if release.tag_name:
            outputs["tag_name"] = release.tag_name
        if release.name:
            outputs["name"] = release.name

    with output_path.open("a", encoding="utf-8") as f:
        for key, value in outputs.items():
            delimiter = f"ghadelimiter_{uuid4()}"
            f.write(f"{key}<<{delimiter}\n{value}\n{delimiter}\n")


def run_draft(
    path: str | None,
    repository: str | None,
    ref: str | None,
    config_file: str | None,
    token: str | None,
    overrides: ReleaseOverrides,
    dry_run: bool,
    console: Console,
    err_console: Console,
) -> None:
    """Run the draft command.

    Args:
        path: Optional path to the project directory
        repository: ``owner/name`` of the GitHub repository
        ref: Git ref to draft for (e.g. ``refs/heads/main``)
        config_file: Optional standalone config file
        token: GitHub token
        overrides: Version, tag, name, prerelease and publish overrides
        dry_run: Render without creating or updating the release
        console: Console for standard output
        err_console: Console for error output
    """
    project_path = Path(path) if path else Path.cwd()

    # Load configuration
    try:
        config = load_config(project_path, Path(config_file) if config_file else None)
    except ConfigValidationError as e:
        err_console.print(f"[red]Invalid config:[/] {e}")
        print_config_errors(e, err_console)
        raise SystemExit(1) from e
    except ReleaseDrafterError as e:
        err_console.print(f"[red]Error loading config:[/] {e}")
        raise SystemExit(1) from e

    ref = ref or os.environ.get("GITHUB_REF")
    if not ref:
        err_console.print("[red]Error:[/] No ref given. Use --ref or set GITHUB_REF.")
        raise SystemExit(1)

    if not is_triggerable_reference(ref, config.references):
        console.print(f"[yellow]{ref} does not match the configured references. Nothing to do.[/]")
        return

    try:
        owner, repo = split_repository(repository or os.environ.get("GITHUB_REPOSITORY"))
        client = GitHubClient(token, config.github)
        result = Drafter(client, owner, repo, config).run(ref, overrides, dry_run=dry_run)
    except ReleaseDrafterError as e:
        err_console.print(f"[red]Error:[/] {e}")
        raise SystemExit(1) from e

    plan = result.plan
    mode_str = "[yellow]DRY-RUN[/]" if dry_run else "[green]EXECUTING[/]"
    title = plan.name or plan.tag_name or "(unnamed)"
    flags = []
    if plan.payload["draft"]:
        flags.append("draft")
    if plan.payload["prerelease"]:
        flags.append("prerelease")
    console.print(
        f"\n{mode_str} - {plan.action.value} release [cyan]{title}[/]"
        f" (tag: [cyan]{plan.tag_name or '-'}[/], {', '.join(flags) or 'published'})\n"
    )
    body = Text(plan.body) if plan.body else Text("(empty body)", style="dim")
    console.print(Panel(body, title="Release notes", border_style="blue"))

    if result.release is not None and result.release.html_url:
        console.print(f"  [green]✓[/] {result.release.html_url}")

    output_file = os.environ.get("GITHUB_OUTPUT")
    if output_file:
        write_action_outputs(result, Path(output_file))
