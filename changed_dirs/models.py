from __future__ import annotations

from dataclasses import dataclass, asdict, field
from datetime import datetime, timezone
from typing import Any


PULL_REQUEST = "pull_request"
PUSH = "push"
UNKNOWN = "unknown"

# Push events for a brand new branch report an all-zero "before" revision.
NULL_REVISION = "0" * 40


def _clean_revision(value: str | None) -> str | None:
    if not value:
        return None
    rev = str(value).strip()
    if not rev or rev == NULL_REVISION:
        return None
    return rev


@dataclass(frozen=True)
class RevisionPair:
    base: str
    head: str


@dataclass(frozen=True)
class TriggerContext:
    kind: str
    event_name: str
    base: str | None = None
    head: str | None = None

    @classmethod
    def pull_request(cls, base: str | None, head: str | None, event_name: str = PULL_REQUEST) -> "TriggerContext":
        return cls(kind=PULL_REQUEST, event_name=event_name, base=_clean_revision(base), head=_clean_revision(head))

    @classmethod
    def push(cls, before: str | None, after: str | None) -> "TriggerContext":
        return cls(kind=PUSH, event_name=PUSH, base=_clean_revision(before), head=_clean_revision(after))

    @classmethod
    def unknown(cls, event_name: str = "") -> "TriggerContext":
        return cls(kind=UNKNOWN, event_name=event_name or UNKNOWN)

    def revisions(self) -> RevisionPair | None:
        """Return the revision pair, or None when either endpoint is missing."""
        if not self.base or not self.head:
            return None
        return RevisionPair(base=self.base, head=self.head)


@dataclass(frozen=True)
class SourceResult:
    source: str
    ok: bool
    files: list[str] = field(default_factory=list)
    reason: str | None = None
    attempted: bool = True

    @classmethod
    def success(cls, source: str, files: list[str]) -> "SourceResult":
        return cls(source=source, ok=True, files=list(files))

    @classmethod
    def failure(cls, source: str, reason: str) -> "SourceResult":
        return cls(source=source, ok=False, reason=reason)

    @classmethod
    def unavailable(cls, source: str, reason: str) -> "SourceResult":
        return cls(source=source, ok=False, reason=reason, attempted=False)


@dataclass(frozen=True)
class Resolution:
    source: str
    files: list[str]
    attempts: list[SourceResult] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class DetectionReport:
    base_directory: str
    exclude_dirs: list[str]
    trigger: str
    source: str
    files_considered: int
    changed_dirs: list[str]
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        out = asdict(self)
        out["generated_at"] = datetime.now(timezone.utc).isoformat()
        return out
