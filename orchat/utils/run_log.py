from __future__ import annotations

import json
from collections import deque
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from orchat.errors import ChatError
from orchat.session import ConversationSession


@dataclass(frozen=True)
class RunLogPaths:
    run_id: str
    jsonl_path: Path


def make_run_id() -> str:
    return datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")


def init_run_log(log_dir: Path, run_id: str) -> RunLogPaths:
    log_dir.mkdir(parents=True, exist_ok=True)
    return RunLogPaths(run_id=run_id, jsonl_path=log_dir / f"run_{run_id}.jsonl")


def session_summary(session: ConversationSession) -> dict[str, Any]:
    """Shape of the session without its content: message text never goes to disk."""
    roles: dict[str, int] = {}
    for m in session.history:
        roles[m.role] = roles.get(m.role, 0) + 1
    return {"turns": session.turns, "history_len": len(session.history), "roles": roles}


def append_event(
    paths: RunLogPaths,
    event: str,
    *,
    session: ConversationSession | None = None,
    extra: dict[str, Any] | None = None,
) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "ts": datetime.now(timezone.utc).isoformat(),
        "run_id": paths.run_id,
        "event": event,
    }
    if session is not None:
        payload.update(session_summary(session))
    if extra:
        payload.update(extra)
    with paths.jsonl_path.open("a", encoding="utf-8", newline="\n") as f:
        f.write(json.dumps(payload, ensure_ascii=False) + "\n")
    return payload


def log_turn(paths: RunLogPaths, session: ConversationSession, reply: str, elapsed_ms: int) -> dict[str, Any]:
    return append_event(paths, "turn", session=session, extra={"reply_len": len(reply), "elapsed_ms": elapsed_ms})


def log_error(paths: RunLogPaths, session: ConversationSession, error: ChatError) -> dict[str, Any]:
    # Error text can quote the request back (moderation bodies do), so only its kind is kept.
    extra: dict[str, Any] = {"kind": error.kind}
    status_code = getattr(error, "status_code", None)
    if status_code is not None:
        extra["status_code"] = status_code
    return append_event(paths, "error", session=session, extra=extra)


def recent_events(path: Path, limit: int = 200) -> list[dict[str, Any]]:
    """Last `limit` events of a run log, skipping lines that are not JSON objects."""
    if not path.exists():
        return []
    tail: deque[dict[str, Any]] = deque(maxlen=limit)
    with path.open(encoding="utf-8", errors="replace") as f:
        for ln in f:
            try:
                obj = json.loads(ln)
            except json.JSONDecodeError:
                continue
            if isinstance(obj, dict):
                tail.append(obj)
    return list(tail)
