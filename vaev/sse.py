"""Server-sent event writer for DOM fragments, signals and scripts.

Events follow the Datastar wire convention the front-end listens for.
"""
from __future__ import annotations

import json
from typing import Any, Dict, Iterator, List, Optional

from fastapi.responses import StreamingResponse

EVENT_MERGE_FRAGMENTS = "datastar-merge-fragments"
EVENT_MERGE_SIGNALS = "datastar-merge-signals"
EVENT_EXECUTE_SCRIPT = "datastar-execute-script"

MERGE_MODE_MORPH = "morph"
MERGE_MODE_APPEND = "append"


def format_event(event_type: str, data_lines: List[str]) -> str:
    lines = [f"event: {event_type}"]
    lines.extend(f"data: {line}" for line in data_lines)
    return "\n".join(lines) + "\n\n"


def _prefixed(prefix: str, text: str) -> List[str]:
    return [f"{prefix} {line}" for line in text.splitlines() or [""]]


class ServerSentEventGenerator:
    """Collects events for one response; handlers finish their work before streaming."""

    def __init__(self) -> None:
        self._events: List[str] = []

    @property
    def events(self) -> List[str]:
        return list(self._events)

    def merge_fragments(self, fragments: str, selector: Optional[str] = None,
                        merge_mode: str = MERGE_MODE_MORPH) -> None:
        data: List[str] = []
        if selector:
            data.append(f"selector {selector}")
        if merge_mode != MERGE_MODE_MORPH:
            data.append(f"mergeMode {merge_mode}")
        data.extend(_prefixed("fragments", fragments.strip()))
        self._events.append(format_event(EVENT_MERGE_FRAGMENTS, data))

    def merge_signals(self, signals: Dict[str, Any]) -> None:
        payload = json.dumps(signals, separators=(",", ":"))
        self._events.append(format_event(EVENT_MERGE_SIGNALS, [f"signals {payload}"]))

    def execute_script(self, script: str) -> None:
        self._events.append(format_event(EVENT_EXECUTE_SCRIPT, _prefixed("script", script.strip())))

    def _stream(self) -> Iterator[str]:
        yield from self._events

    def response(self, status_code: int = 200) -> StreamingResponse:
        return StreamingResponse(
            self._stream(),
            status_code=status_code,
            media_type="text/event-stream",
            headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
        )
