from __future__ import annotations

from functools import partial
from pathlib import Path
import typer

from changed_dirs.classifier import classify
from changed_dirs.config import ConfigError, DetectSettings, load_env_file, load_settings, resolve_workspace
from changed_dirs.events import load_trigger_context
from changed_dirs.git_scope import diff_names, list_files, recent_revisions
from changed_dirs.github_api import compare_commits, parse_repository
from changed_dirs.models import DetectionReport, RevisionPair
from changed_dirs.reporters import (
    error,
    format_output,
    warning,
    write_github_output,
    write_json_report,
)
from changed_dirs.resolver import Capabilities, resolve

OUTPUT_NAME = "changed-dirs"

app = typer.Typer(help="changed-dirs: list first-level directories with changes")


@app.callback()
def main() -> None:
    """changed-dirs command group."""


def build_capabilities(settings: DetectSettings) -> Capabilities:
    root = settings.workspace
    timeout = settings.timeout_seconds

    def local_diff(pair: RevisionPair | None) -> str:
        if pair is None:
            return diff_names(root, timeout=timeout)
        return diff_names(root, pair.base, pair.head, timeout=timeout)

    def compare(base: str, head: str) -> list[str]:
        owner, repo = parse_repository(settings.repository)
        return compare_commits(owner, repo, base, head, settings.token, api_url=settings.api_url, timeout=timeout)

    return Capabilities(
        compare_revisions=compare if settings.use_remote else None,
        recent_revisions=partial(recent_revisions, root, timeout=timeout),
        local_diff=local_diff,
        list_files=partial(list_files, root),
    )


@app.command()
def detect(
    base_directory: str | None = typer.Option(None, help="Directory whose first-level subdirectories are classified"),
    exclude_dirs: str | None = typer.Option(None, help="Comma-separated directory names to leave out"),
    token: str | None = typer.Option(None, help="GitHub token for the compare API (defaults to GITHUB_TOKEN)"),
    workspace: str | None = typer.Option(None, help="Workspace root (defaults to GITHUB_WORKSPACE or cwd)"),
    remote: str | None = typer.Option(None, help="Remote compare API: auto|on|off"),
    timeout: int | None = typer.Option(None, help="Timeout in seconds for the compare API and git"),
    config: str | None = typer.Option(None, help="Optional YAML config file"),
    json_out: str | None = typer.Option(None, help="Optional JSON report output path"),
    sort: bool = typer.Option(False, "--sort", help="Sort directory names instead of first-seen order"),
) -> None:
    # Load .env from the current directory first, then the workspace root.
    load_env_file(Path.cwd() / ".env")
    load_env_file(resolve_workspace(workspace) / ".env")

    try:
        settings = load_settings(
            base_directory=base_directory,
            exclude_dirs=exclude_dirs,
            token=token,
            workspace=workspace,
            remote_mode=remote,
            timeout_seconds=timeout,
            config_path=config,
        )
    except ConfigError as exc:
        error(str(exc))
        raise typer.Exit(code=2)

    try:
        context = load_trigger_context()
        resolution = resolve(context, settings.base_directory, build_capabilities(settings))
        for message in resolution.warnings:
            warning(message)

        changed = classify(
            resolution.files,
            settings.base_directory,
            settings.exclude_dirs,
            root=settings.workspace,
        )
        if sort:
            changed = sorted(changed)

        value = format_output(changed)
        if settings.github_output:
            write_github_output(Path(settings.github_output), OUTPUT_NAME, value)
        typer.echo(f"{OUTPUT_NAME}={value}")

        if json_out:
            report = DetectionReport(
                base_directory=settings.base_directory,
                exclude_dirs=settings.exclude_dirs,
                trigger=context.event_name,
                source=resolution.source,
                files_considered=len(resolution.files),
                changed_dirs=changed,
                warnings=resolution.warnings,
            )
            write_json_report(report, Path(json_out))
            typer.echo(f"Wrote: {json_out}")

        typer.echo(f"Changed directories: {changed} (source={resolution.source}, files={len(resolution.files)})")
    except Exception as exc:
        error(str(exc) or exc.__class__.__name__)
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
