from __future__ import annotations

from pathlib import Path
from typing import Any
import json
import os

from changed_dirs.models import PUSH, TriggerContext


PULL_REQUEST_EVENTS = {"pull_request", "pull_request_target"}


def load_event_payload(path: str | None) -> dict[str, Any]:
    """Read the webhook payload the runner stores at GITHUB_EVENT_PATH.

    A missing or unreadable payload yields an empty dict; the trigger then
    carries no revisions and resolution falls back accordingly.
    """
    if not path:
        return {}
    event_path = Path(path)
    if not event_path.is_file():
        return {}
    try:
        data = json.loads(event_path.read_text(errors="ignore"))
    except (OSError, ValueError):
        return {}
    return data if isinstance(data, dict) else {}


def _sha(obj: Any) -> str | None:
    if isinstance(obj, dict):
        value = obj.get("sha")
        return str(value) if value else None
    return None


def build_trigger_context(event_name: str | None, payload: dict[str, Any]) -> TriggerContext:
    name = (event_name or "").strip()

    if name in PULL_REQUEST_EVENTS:
        pr = payload.get("pull_request")
        if not isinstance(pr, dict):
            pr = {}
        return TriggerContext.pull_request(_sha(pr.get("base")), _sha(pr.get("head")), event_name=name)

    if name == PUSH:
        return TriggerContext.push(payload.get("before"), payload.get("after"))

    return TriggerContext.unknown(name)


def load_trigger_context() -> TriggerContext:
    return build_trigger_context(
        os.getenv("GITHUB_EVENT_NAME"),
        load_event_payload(os.getenv("GITHUB_EVENT_PATH")),
    )
