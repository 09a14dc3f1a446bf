from unittest.mock import MagicMock, patch

import pytest
import requests

from changed_dirs.github_api import GitHubApiError, compare_commits, parse_repository


def _response(payload, status=200, links=None):
    resp = MagicMock()
    resp.status_code = status
    resp.json.return_value = payload
    resp.links = links or {}
    if status >= 400:
        resp.raise_for_status.side_effect = requests.HTTPError(response=resp)
    return resp


@patch("changed_dirs.github_api.requests.get")
def test_compare_commits_returns_filenames(mock_get):
    mock_get.return_value = _response({"files": [{"filename": "svc/a/x.go"}, {"filename": "README.md"}]})

    out = compare_commits("octo", "repo", "b1", "h1", "tok", api_url="https://api.example.com/", timeout=7)

    assert out == ["svc/a/x.go", "README.md"]
    url = mock_get.call_args.args[0]
    assert url == "https://api.example.com/repos/octo/repo/compare/b1...h1"
    assert mock_get.call_args.kwargs["headers"]["Authorization"] == "Bearer tok"
    assert mock_get.call_args.kwargs["timeout"] == 7


@patch("changed_dirs.github_api.requests.get")
def test_compare_commits_follows_next_link(mock_get):
    mock_get.side_effect = [
        _response({"files": [{"filename": "a/b/1"}]}, links={"next": {"url": "https://api.github.com/next?page=2"}}),
        _response({"files": [{"filename": "a/c/2"}]}),
    ]

    out = compare_commits("o", "r", "b", "h", "t")

    assert out == ["a/b/1", "a/c/2"]
    assert mock_get.call_args.args[0] == "https://api.github.com/next?page=2"
    assert mock_get.call_args.kwargs["params"] is None


@patch("changed_dirs.github_api.requests.get")
def test_compare_commits_http_error(mock_get):
    mock_get.return_value = _response({"message": "Not Found"}, status=404)
    with pytest.raises(GitHubApiError, match="404"):
        compare_commits("o", "r", "b", "h", "t")


@patch("changed_dirs.github_api.requests.get", side_effect=requests.Timeout())
def test_compare_commits_timeout(mock_get):
    with pytest.raises(GitHubApiError, match="timed out"):
        compare_commits("o", "r", "b", "h", "t", timeout=3)


@patch("changed_dirs.github_api.requests.get")
def test_compare_commits_malformed_body(mock_get):
    mock_get.return_value = _response({"status": "ahead"})
    with pytest.raises(GitHubApiError):
        compare_commits("o", "r", "b", "h", "t")


def test_parse_repository():
    assert parse_repository("octo/repo") == ("octo", "repo")
    for bad in (None, "", "octo", "octo/", "a/b/c"):
        with pytest.raises(GitHubApiError):
            parse_repository(bad)
