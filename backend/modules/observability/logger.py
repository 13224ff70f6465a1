"""
modules/observability/logger.py
--------------------------------
Append-only route event log, one JSON object per line.

Each session gets <LOGS_DIR>/<session_id>.jsonl.  Records look like:

    {"timestamp": "...", "session_id": "...", "event_type": "LANDMARK_ADDED",
     "payload": {"landmark": {...}, "state_hash": "..."}}

State events (BASE_SET, LANDMARK_ADDED, LANDMARK_REMOVED) carry the hash of
the RouteState after the change, which replay.py checks against.
PERFORMANCE records are informational and ignored on replay.
"""

from __future__ import annotations

import json
import os
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import IO, Iterator

import config
from schemas.route import RouteState

STATE_EVENTS = frozenset({"BASE_SET", "LANDMARK_ADDED", "LANDMARK_REMOVED"})


class StructuredLogger:
    """Thread-safe JSONL writer keyed by session id."""

    def __init__(self, logs_dir: Path | str | None = None) -> None:
        self._logs_dir = Path(logs_dir) if logs_dir else None
        self._lock = threading.Lock()
        self._files: dict[Path, IO[str]] = {}

    @property
    def logs_dir(self) -> Path:
        # config.LOGS_DIR is read per call so tests can redirect it
        return self._logs_dir or Path(config.LOGS_DIR)

    def path_for(self, session_id: str) -> Path:
        return self.logs_dir / f"{session_id}.jsonl"

    def log(self, session_id: str, event_type: str, payload: dict) -> None:
        """Append one record to the session's log."""
        line = json.dumps(
            {
                "timestamp": datetime.now(timezone.utc).isoformat(),
                "session_id": session_id,
                "event_type": event_type,
                "payload": payload,
            },
            default=str,
            ensure_ascii=False,
        )
        path = self.path_for(session_id)
        with self._lock:
            fh = self._files.get(path)
            if fh is None:
                os.makedirs(path.parent, exist_ok=True)
                fh = open(path, "a", encoding="utf-8")  # noqa: SIM115
                self._files[path] = fh
            fh.write(line + "\n")
            fh.flush()

    def log_state(self, session_id: str, event_type: str, state: RouteState, **payload) -> None:
        """Log a state-changing event stamped with the resulting state hash."""
        if event_type not in STATE_EVENTS:
            raise ValueError(f"not a state event: {event_type!r}")
        payload["state_hash"] = state.state_hash()
        self.log(session_id, event_type, payload)

    def read(self, session_id: str) -> Iterator[dict]:
        """Yield the session's records in write order."""
        path = self.path_for(session_id)
        if not path.exists():
            raise FileNotFoundError(f"Log file not found: {path}")
        with open(path, "r", encoding="utf-8") as fh:
            for line in fh:
                line = line.strip()
                if line:
                    yield json.loads(line)

    def close(self, session_id: str | None = None) -> None:
        """Close one session's handle, or every open handle."""
        with self._lock:
            if session_id is not None:
                fh = self._files.pop(self.path_for(session_id), None)
                if fh is not None:
                    fh.close()
                return
            for fh in self._files.values():
                fh.close()
            self._files.clear()

    def is_open(self, session_id: str) -> bool:
        return self.path_for(session_id) in self._files
