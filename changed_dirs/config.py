from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any
import os
import yaml


DEFAULT_TIMEOUT_SECONDS = 25
DEFAULT_API_URL = "https://api.github.com"
REMOTE_MODES = {"auto", "on", "off"}


class ConfigError(ValueError):
    pass


@dataclass
class DetectSettings:
    base_directory: str
    exclude_dirs: list[str] = field(default_factory=list)
    workspace: Path = field(default_factory=Path.cwd)
    token: str | None = None
    remote_mode: str = "auto"  # auto|on|off
    use_remote: bool = False
    repository: str | None = None
    api_url: str = DEFAULT_API_URL
    timeout_seconds: int = DEFAULT_TIMEOUT_SECONDS
    github_output: str | None = None


def load_env_file(path: Path) -> None:
    """Load KEY=VALUE pairs from a .env file without overriding existing env."""
    if not path.is_file():
        return

    for raw in path.read_text(errors="ignore").splitlines():
        line = raw.strip()
        if line.startswith("export "):
            line = line[len("export "):].lstrip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        if key and key not in os.environ:
            os.environ[key] = value.strip().strip('"').strip("'")


def get_input(name: str) -> str | None:
    """Read an action input the way the runner exports it (INPUT_<NAME>)."""
    upper = name.upper()
    for key in (f"INPUT_{upper}", f"INPUT_{upper.replace('-', '_')}"):
        value = os.getenv(key)
        if value is not None and value.strip():
            return value.strip()
    return None


def parse_exclude_dirs(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        items = value.split(",")
    elif isinstance(value, (list, tuple, set)):
        items = [str(x) for x in value]
    else:
        raise ConfigError(f"exclude_dirs must be a list or comma-separated string, got {type(value).__name__}")

    out: list[str] = []
    for item in items:
        name = item.strip()
        if name and name not in out:
            out.append(name)
    return out


def load_config_file(path: str | None) -> dict[str, Any]:
    if not path:
        return {}

    config_path = Path(path)
    if not config_path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    try:
        data = yaml.safe_load(config_path.read_text()) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid config file {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")
    return data


def in_github_actions() -> bool:
    return (os.getenv("GITHUB_ACTIONS") or "").strip().lower() == "true"


def _first(*values: Any) -> Any:
    for value in values:
        if value is None:
            continue
        if isinstance(value, str) and not value.strip():
            continue
        return value
    return None


def resolve_workspace(workspace: str | None = None) -> Path:
    return Path(_first(workspace, os.getenv("GITHUB_WORKSPACE")) or Path.cwd()).resolve()


def _parse_timeout(value: Any) -> int:
    try:
        timeout = int(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid timeout: {value!r}") from exc
    if timeout <= 0:
        raise ConfigError(f"Timeout must be positive, got {timeout}")
    return timeout


def load_settings(
    base_directory: str | None = None,
    exclude_dirs: str | None = None,
    token: str | None = None,
    workspace: str | None = None,
    remote_mode: str | None = None,
    timeout_seconds: int | None = None,
    config_path: str | None = None,
) -> DetectSettings:
    """Merge CLI overrides, action inputs, the optional YAML file and defaults."""
    file_cfg = load_config_file(config_path)

    base = _first(base_directory, get_input("base-directory"), file_cfg.get("base_directory"))
    if base is None:
        raise ConfigError("Input required and not supplied: base-directory")

    excludes = parse_exclude_dirs(_first(exclude_dirs, get_input("exclude-dirs"), file_cfg.get("exclude_dirs")))

    mode = str(_first(remote_mode, os.getenv("CHANGED_DIRS_REMOTE"), file_cfg.get("remote"), "auto")).strip().lower()
    if mode not in REMOTE_MODES:
        raise ConfigError(f"Invalid remote mode '{mode}' (expected auto|on|off)")
    use_remote = mode == "on" or (mode == "auto" and in_github_actions())

    resolved_token = _first(token, get_input("token"), os.getenv("GITHUB_TOKEN"))
    if use_remote and not resolved_token:
        raise ConfigError("A GitHub token is required for the remote comparison (set GITHUB_TOKEN or the token input)")

    timeout = _parse_timeout(
        _first(
            timeout_seconds,
            os.getenv("CHANGED_DIRS_TIMEOUT_SECONDS"),
            file_cfg.get("timeout_seconds"),
            DEFAULT_TIMEOUT_SECONDS,
        )
    )

    return DetectSettings(
        base_directory=str(base).strip(),
        exclude_dirs=excludes,
        workspace=resolve_workspace(workspace),
        token=resolved_token,
        remote_mode=mode,
        use_remote=use_remote,
        repository=_first(os.getenv("GITHUB_REPOSITORY")),
        api_url=(_first(os.getenv("GITHUB_API_URL")) or DEFAULT_API_URL).rstrip("/"),
        timeout_seconds=timeout,
        github_output=_first(os.getenv("GITHUB_OUTPUT")),
    )
