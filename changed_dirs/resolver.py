from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from changed_dirs.git_scope import GitScopeError
from changed_dirs.github_api import GitHubApiError
from changed_dirs.models import PULL_REQUEST, PUSH, Resolution, RevisionPair, SourceResult, TriggerContext


REMOTE = "remote"
LOCAL = "local"
LISTING = "listing"

# Failures a change source may raise; anything else is a bug and propagates.
SOURCE_ERRORS = (GitHubApiError, GitScopeError, OSError)


@dataclass
class Capabilities:
    compare_revisions: Callable[[str, str], list[str]] | None = None
    recent_revisions: Callable[[int], list[str]] | None = None
    local_diff: Callable[[RevisionPair | None], str] | None = None
    list_files: Callable[[str], list[str]] | None = None


@dataclass(frozen=True)
class _PairResult:
    pair: RevisionPair | None
    reason: str | None = None


def derive_revisions(context: TriggerContext, capabilities: Capabilities) -> _PairResult:
    """Work out the (base, head) window for the trigger.

    Pull requests and pushes carry their own endpoints. Other triggers use the
    two most recent commits; fewer than two means insufficient history.
    """
    if context.kind in (PULL_REQUEST, PUSH):
        pair = context.revisions()
        if pair is None:
            return _PairResult(None, f"{context.event_name} event is missing a base or head revision")
        return _PairResult(pair)

    if capabilities.recent_revisions is None:
        return _PairResult(None, f"unsupported event type '{context.event_name}' and no local history")
    try:
        revs = capabilities.recent_revisions(2)
    except SOURCE_ERRORS as exc:
        return _PairResult(None, f"cannot read recent revisions: {exc}")
    if len(revs) < 2:
        return _PairResult(None, f"insufficient history for event type '{context.event_name}'")
    return _PairResult(RevisionPair(base=revs[1], head=revs[0]))


def _remote_source(revisions: _PairResult, capabilities: Capabilities) -> SourceResult:
    if capabilities.compare_revisions is None:
        return SourceResult.unavailable(REMOTE, "remote comparison is not enabled")
    if revisions.pair is None:
        return SourceResult.failure(REMOTE, revisions.reason or "no revision pair")
    try:
        files = capabilities.compare_revisions(revisions.pair.base, revisions.pair.head)
    except SOURCE_ERRORS as exc:
        return SourceResult.failure(REMOTE, str(exc))
    return SourceResult.success(REMOTE, files)


def _local_source(revisions: _PairResult, capabilities: Capabilities) -> SourceResult:
    if capabilities.local_diff is None:
        return SourceResult.unavailable(LOCAL, "local history is not available")
    try:
        stdout = capabilities.local_diff(revisions.pair)
    except SOURCE_ERRORS as exc:
        return SourceResult.failure(LOCAL, str(exc))
    files = [line.strip() for line in stdout.splitlines() if line.strip()]
    return SourceResult.success(LOCAL, files)


def _listing_source(base_directory: str, capabilities: Capabilities) -> SourceResult:
    if capabilities.list_files is None:
        return SourceResult.unavailable(LISTING, "full listing is not available")
    try:
        files = capabilities.list_files(base_directory)
    except SOURCE_ERRORS as exc:
        return SourceResult.failure(LISTING, f"cannot list '{base_directory}': {exc}")
    return SourceResult.success(LISTING, files)


def resolve(context: TriggerContext, base_directory: str, capabilities: Capabilities) -> Resolution:
    """Changed files from the best available source.

    Sources are tried in order (remote comparison, local git diff, full
    listing of the base directory) and the first success wins. Failures are
    recorded as warnings. If every source fails the result is empty.
    """
    revisions = derive_revisions(context, capabilities)
    strategies: list[Callable[[], SourceResult]] = [
        lambda: _remote_source(revisions, capabilities),
        lambda: _local_source(revisions, capabilities),
        lambda: _listing_source(base_directory, capabilities),
    ]

    attempts: list[SourceResult] = []
    warnings: list[str] = []
    for strategy in strategies:
        result = strategy()
        attempts.append(result)
        if result.ok:
            return Resolution(source=result.source, files=result.files, attempts=attempts, warnings=warnings)
        if result.attempted:
            warnings.append(f"{result.source} change source failed: {result.reason}")

    warnings.append("no change source succeeded; treating as zero changed files")
    return Resolution(source="none", files=[], attempts=attempts, warnings=warnings)
