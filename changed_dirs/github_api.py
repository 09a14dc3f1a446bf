from __future__ import annotations

from typing import Any

import requests

from changed_dirs.config import DEFAULT_API_URL

PER_PAGE = 100
MAX_PAGES = 30


class GitHubApiError(RuntimeError):
    pass


def parse_repository(value: str | None) -> tuple[str, str]:
    owner, _, repo = (value or "").strip().partition("/")
    if not owner or not repo or "/" in repo:
        raise GitHubApiError(f"Invalid repository '{value}' (expected owner/repo)")
    return owner, repo


def _compare_url(api_url: str, owner: str, repo: str, base: str, head: str) -> str:
    return f"{api_url.rstrip('/')}/repos/{owner}/{repo}/compare/{base}...{head}"


def _file_names(data: Any) -> list[str]:
    files = data.get("files") if isinstance(data, dict) else None
    if not isinstance(files, list):
        raise GitHubApiError("Compare response has no 'files' list")
    out: list[str] = []
    for entry in files:
        if isinstance(entry, dict) and entry.get("filename"):
            out.append(str(entry["filename"]))
    return out


def compare_commits(
    owner: str,
    repo: str,
    base: str,
    head: str,
    token: str | None,
    api_url: str = DEFAULT_API_URL,
    timeout: int = 25,
) -> list[str]:
    """Return the file names changed between two commits via the compare API.

    Follows ``Link: rel="next"`` pagination. Any transport error, timeout,
    non-2xx status or malformed body is raised as GitHubApiError.
    """
    headers = {
        "Accept": "application/vnd.github+json",
        "X-GitHub-Api-Version": "2022-11-28",
    }
    if token:
        headers["Authorization"] = f"Bearer {token}"

    url: str | None = _compare_url(api_url, owner, repo, base, head)
    params: dict[str, Any] | None = {"per_page": PER_PAGE}
    names: list[str] = []

    for _ in range(MAX_PAGES):
        if not url:
            break
        try:
            resp = requests.get(url, headers=headers, params=params, timeout=timeout)
            resp.raise_for_status()
            data = resp.json()
        except requests.Timeout as exc:
            raise GitHubApiError(f"Compare request timed out after {timeout}s") from exc
        except requests.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else "n/a"
            raise GitHubApiError(f"Compare request failed with HTTP {status}") from exc
        except ValueError as exc:
            raise GitHubApiError("Compare response is not valid JSON") from exc
        except requests.RequestException as exc:
            raise GitHubApiError(f"Compare request failed: {str(exc)[:220]}") from exc

        names.extend(_file_names(data))
        url = resp.links.get("next", {}).get("url")
        # The next link already carries the query string.
        params = None

    return names
