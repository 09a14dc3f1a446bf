from __future__ import annotations

from pathlib import Path
import json
import uuid

import typer

from changed_dirs.config import in_github_actions
from changed_dirs.models import DetectionReport


def format_output(dirs: list[str]) -> str:
    return json.dumps(dirs, separators=(",", ":"))


def write_github_output(path: Path, name: str, value: str) -> None:
    """Append ``name=value`` to the runner's output file.

    Multi-line values use the ``name<<DELIMITER`` form.
    """
    with path.open("a", encoding="utf-8") as fh:
        if "\n" in value:
            delimiter = f"ghadelimiter_{uuid.uuid4()}"
            fh.write(f"{name}<<{delimiter}\n{value}\n{delimiter}\n")
        else:
            fh.write(f"{name}={value}\n")


def _escape_command_data(message: str) -> str:
    return message.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def warning(message: str) -> None:
    if in_github_actions():
        typer.echo(f"::warning::{_escape_command_data(message)}")
    else:
        typer.secho(f"warning: {message}", fg=typer.colors.YELLOW, err=True)


def error(message: str) -> None:
    if in_github_actions():
        typer.echo(f"::error::{_escape_command_data(message)}")
    else:
        typer.secho(f"error: {message}", fg=typer.colors.RED, err=True)


def write_json_report(report: DetectionReport, path: Path) -> None:
    path.write_text(json.dumps(report.to_dict(), indent=2))
