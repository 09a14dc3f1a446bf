from __future__ import annotations

from pathlib import Path
import os
import subprocess


class GitScopeError(RuntimeError):
    pass


def _run_git(root: Path, args: list[str], timeout: int | None = None) -> str:
    cmd = ["git", *args]

    try:
        proc = subprocess.run(
            cmd,
            cwd=str(root),
            capture_output=True,
            encoding="utf-8",
            errors="replace",
            check=False,
            timeout=timeout,
        )
    except FileNotFoundError as exc:
        raise GitScopeError("git is not installed or not available in PATH") from exc
    except subprocess.TimeoutExpired as exc:
        raise GitScopeError(f"'{' '.join(cmd)}' timed out after {timeout}s") from exc

    if proc.returncode != 0:
        stderr = (proc.stderr or "").strip()
        raise GitScopeError(
            f"'{' '.join(cmd)}' failed. {stderr or 'Check git history and ref availability.'}"
        )
    return proc.stdout or ""


def diff_names(root: Path, base: str | None = None, head: str | None = None, timeout: int | None = None) -> str:
    """Raw `git diff --name-only` output; without a pair, HEAD~1 against HEAD.

    Paths are reported verbatim, not C-quoted, so non-ASCII names survive.
    """
    if base and head:
        revs = [base, head]
    else:
        revs = ["HEAD~1", "HEAD"]
    return _run_git(root, ["-c", "core.quotePath=false", "diff", "--name-only", *revs], timeout=timeout)


def recent_revisions(root: Path, count: int = 2, timeout: int | None = None) -> list[str]:
    """Most recent commits reachable from HEAD, newest first."""
    stdout = _run_git(root, ["rev-list", f"--max-count={count}", "HEAD"], timeout=timeout)
    return [line.strip() for line in stdout.splitlines() if line.strip()]


def list_files(root: Path, directory: str) -> list[str]:
    """Every file beneath ``root/directory``, relative to root in POSIX form.

    Raises OSError when the directory does not exist or cannot be read.
    """
    target = (root / directory.replace("\\", "/")).resolve()
    if not target.is_dir():
        raise NotADirectoryError(f"Not a directory: {target}")

    errors: list[OSError] = []
    out: list[str] = []
    for current, dirnames, filenames in os.walk(target, onerror=errors.append):
        dirnames[:] = sorted(d for d in dirnames if d != ".git")
        for name in filenames:
            path = Path(current) / name
            try:
                out.append(path.relative_to(root.resolve()).as_posix())
            except ValueError:
                out.append(path.as_posix())
    if errors and not out:
        raise errors[0]
    return sorted(out)
