"""Command line entry point: ``repostage stage``."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from rich import print

from repostage.core.config import load_config
from repostage.core.enums import WriteMode
from repostage.core.exceptions import RepoStageError
from repostage.core.log import configure_logging
from repostage.facade import RepoStage

app = typer.Typer(add_completion=False)


@app.callback()
def main() -> None:
    """Stage build artifacts into an isolated repository for integration tests."""


@app.command()
def stage(
    manifest: Path = typer.Option(..., help="YAML build manifest describing the build"),
    project: str = typer.Option(..., help="Project to stage, as group:artifact"),
    local_repository: Optional[Path] = typer.Option(None, help="Source local repository"),
    staging_repository: Optional[Path] = typer.Option(
        None, help="Staging repository directory (default: the local repository)"
    ),
    skip: bool = typer.Option(False, "--skip", help="Skip artifact installation"),
    config: Optional[Path] = typer.Option(None, help="repostage.yaml configuration file"),
    log_level: Optional[str] = typer.Option(None, help="DEBUG, INFO, WARNING, ERROR"),
):
    """Install a project's artifacts, parent POMs and dependencies into a repository."""
    try:
        settings = load_config(
            str(config) if config else None,
            local_repository=local_repository,
            staging_repository_path=staging_repository,
            skip_installation=True if skip else None,
            log_level=log_level,
        )
        configure_logging(settings.log_level)
        report = RepoStage(settings).run_manifest(manifest, project)
    except FileNotFoundError as exc:
        print(f"[bold red]FILE_NOT_FOUND[/bold red] {exc}")
        raise typer.Exit(code=1)
    except RepoStageError as exc:
        print(f"[bold red]{exc.error_code}[/bold red] {exc.message}")
        raise typer.Exit(code=1)

    if report.skipped:
        print("[yellow]Skipping artifact installation per configuration.[/yellow]")
        return

    print(
        f"[bold]Staged[/bold] {project} -> {report.repository}: "
        f"{report.count(WriteMode.INSTALLED)} installed, "
        f"{report.count(WriteMode.STAGED)} staged, "
        f"{len(report.duplicates)} duplicates skipped"
    )
