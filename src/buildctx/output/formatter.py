"""JSON output helpers."""

from __future__ import annotations

import json
from datetime import datetime, timezone


def to_json(data) -> str:
    return json.dumps(data, indent=2, default=str)


def json_envelope(command: str, summary: dict | None = None, **payload) -> dict:
    """Standard top-level shape for ``--json`` output."""
    return {
        "command": command,
        "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        "summary": summary or {},
        **payload,
    }
