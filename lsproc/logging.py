"""
lsproc.logging
AUTHOR: carter-vin

Events for the lsproc polling loop

- lsproc_start / lsproc_shutdown bracket each stat/diskstats run
- sample_failed carries the procfs error kind (io, end_of_stream, decode, invariant)
- one compact JSON object per line on stderr; stdout belongs to the readout
"""

from __future__ import annotations

import json
import sys
from datetime import datetime, timezone
from typing import Any

VALID_EVENT_TYPES = {
    "lsproc_start",
    "sample_failed",
    "lsproc_shutdown",
}

MESSAGE_LIMIT = 200


def _truncate_message(value: str, *, limit: int = MESSAGE_LIMIT) -> str:
    # DecodeError messages can embed a whole /proc line
    if len(value) <= limit:
        return value
    return value[:limit] + f"...[truncated {len(value) - limit} chars]"


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def emit_event(event_type: str, *, tool_version: str, **fields: Any) -> None:
    """
    Write one lsproc event to stderr

    Raises ValueError for event types outside VALID_EVENT_TYPES.
    """
    if event_type not in VALID_EVENT_TYPES:
        raise ValueError(f"invalid event_type: {event_type}")

    if isinstance(fields.get("message"), str):
        fields["message"] = _truncate_message(fields["message"])

    payload: dict[str, Any] = {
        "event_type": event_type,
        "utc_now": utc_now_iso(),
        "tool_version": tool_version,
        **fields,
    }

    # sys.stderr looked up per call: CliRunner and capsys swap it
    print(
        json.dumps(payload, sort_keys=True, separators=(",", ":"), ensure_ascii=False),
        file=sys.stderr,
        flush=True,
    )
