"""Batched command queue for the legacy variant.

Commands are serialized to JSON when queued and decoded when flushed,
the way the legacy host receives them.
"""

import json
import threading
from typing import Any, Dict, List


class CommandBridge:
    """FIFO of serialized view commands."""

    def __init__(self) -> None:
        self._queue: List[str] = []
        self._lock = threading.Lock()

    def enqueue(self, op: str, tag: int, **payload: Any) -> None:
        command = {"op": op, "tag": tag}
        command.update(payload)
        with self._lock:
            self._queue.append(json.dumps(command))

    def drain(self) -> List[Dict[str, Any]]:
        with self._lock:
            batch, self._queue = self._queue, []
        return [json.loads(raw) for raw in batch]

    def __len__(self) -> int:
        with self._lock:
            return len(self._queue)
