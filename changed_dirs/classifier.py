from __future__ import annotations

from pathlib import Path
from typing import Any, Iterable
import posixpath
import re

_DRIVE = re.compile(r"^[A-Za-z]:/")


def _is_absolute(path: str) -> bool:
    return path.startswith("/") or bool(_DRIVE.match(path))


def _same(a: str, b: str, case_sensitive: bool) -> bool:
    if case_sensitive:
        return a == b
    return a.casefold() == b.casefold()


def _split(path: str) -> list[str]:
    if not path:
        return []
    return path.rstrip("/").split("/")


def _starts_with(parts: list[str], prefix: list[str], case_sensitive: bool) -> bool:
    if len(parts) < len(prefix):
        return False
    return all(_same(a, b, case_sensitive) for a, b in zip(parts, prefix))


def _to_posix(path: str, root: str | Path | None) -> str:
    p = path.strip().replace("\\", "/")
    if root is not None and _is_absolute(p):
        root_parts = _split(posixpath.normpath(str(root).replace("\\", "/")))
        parts = _split(posixpath.normpath(p))
        if root_parts and _starts_with(parts, root_parts, case_sensitive=False):
            p = "/".join(parts[len(root_parts):])
    p = posixpath.normpath(p) if p else ""
    return "" if p == "." else p


def normalize_path(path: Any, root: str | Path | None = None) -> str | None:
    """Normalize a changed file path into workspace-relative POSIX form.

    Backslashes become forward slashes, ``./`` and duplicate separators are
    collapsed, and absolute paths under ``root`` are made relative to it.
    Returns None for anything that cannot name a file in the workspace:
    non-strings, empty values and paths that climb out with ``..``.
    """
    if not isinstance(path, str):
        return None
    p = _to_posix(path, root)
    if not p or p == ".." or p.startswith("../"):
        return None
    return p


def normalize_base_directory(base: str, root: str | Path | None = None) -> str:
    """Slash-terminated base prefix; the workspace root is the empty prefix."""
    p = _to_posix(base or "", root)
    if not p:
        return ""
    return p.rstrip("/") + "/"


def first_level_directory(path: str, base_prefix: str, case_sensitive: bool = False) -> str | None:
    """First path segment below ``base_prefix``, or None when there is none.

    Both arguments must already be normalized. Files directly inside the base
    directory, the base directory itself and paths outside it yield None.
    """
    parts = _split(path)
    base_parts = _split(base_prefix)
    if not _starts_with(parts, base_parts, case_sensitive):
        return None
    rel = [s for s in parts[len(base_parts):] if s]
    if len(rel) < 2:
        return None
    return rel[0]


def classify(
    files: Iterable[Any] | None,
    base_directory: str,
    exclude_dirs: Iterable[str] | None = None,
    root: str | Path | None = None,
    case_sensitive: bool = False,
) -> list[str]:
    """Unique first-level directories under ``base_directory`` with changes.

    Order follows the first changed file seen in each directory.
    """
    base_prefix = normalize_base_directory(base_directory, root)
    excluded = set(exclude_dirs or ())

    out: list[str] = []
    seen: set[str] = set()
    for raw in files or ():
        path = normalize_path(raw, root)
        if path is None:
            continue
        first_dir = first_level_directory(path, base_prefix, case_sensitive=case_sensitive)
        if first_dir is None or first_dir in excluded or first_dir in seen:
            continue
        seen.add(first_dir)
        out.append(first_dir)
    return out
