"""Legacy progress view: updates are batched through the command bridge."""

import itertools
import logging
import threading
from typing import Any, Dict, Optional, Set

from progress_view.shared import (
    ProgressResource, ProgressViewAPI, UnknownViewError, apply_property, create_resource,
    normalize_property,
)
from structures import VariantContext
from variant_runtime import register_implementation

from .bridge import CommandBridge

logger = logging.getLogger(__name__)

# Queued commands are applied once this many are pending
MAX_PENDING_COMMANDS = 64


class LegacyProgressView(ProgressViewAPI):
    """Queues commands and applies them on the next read or dispose.

    The queue is also drained whenever MAX_PENDING_COMMANDS are waiting.
    """

    def __init__(self) -> None:
        self._bridge = CommandBridge()
        self._views: Dict[int, ProgressResource] = {}
        self._live: Set[int] = set()
        self._tags = itertools.count(1)
        self._lock = threading.RLock()

    def _check_live(self, tag: int) -> None:
        if tag not in self._live:
            raise UnknownViewError(tag)

    def flush(self) -> int:
        """Apply queued commands. Returns the number applied."""
        with self._lock:
            commands = self._bridge.drain()
            for command in commands:
                tag = command["tag"]
                if command["op"] == "create":
                    self._views[tag] = create_resource(command["props"])
                elif command["op"] == "update":
                    self._views[tag] = apply_property(self._views[tag],
                                                      command["name"], command["value"])
                elif command["op"] == "dispose":
                    self._views.pop(tag, None)
            return len(commands)

    def _flush_if_full(self) -> None:
        if len(self._bridge) >= MAX_PENDING_COMMANDS:
            self.flush()

    def create(self, props: Optional[Dict[str, Any]] = None) -> int:
        normalized = {name: normalize_property(name, value)
                      for name, value in (props or {}).items()}
        with self._lock:
            tag = next(self._tags)
            self._live.add(tag)
            self._bridge.enqueue("create", tag, props=normalized)
            self._flush_if_full()
        return tag

    def set_property(self, tag: int, name: str, value: Any) -> None:
        with self._lock:
            self._check_live(tag)
            self._bridge.enqueue("update", tag, name=name,
                                 value=normalize_property(name, value))
            self._flush_if_full()

    def get_properties(self, tag: int) -> ProgressResource:
        with self._lock:
            self._check_live(tag)
            self.flush()
            return dict(self._views[tag])  # type: ignore[return-value]

    def dispose(self, tag: int) -> None:
        with self._lock:
            self._check_live(tag)
            self._live.discard(tag)
            self._bridge.enqueue("dispose", tag)
            self.flush()

    def view_count(self) -> int:
        with self._lock:
            return len(self._live)


def create_component(context: VariantContext) -> LegacyProgressView:
    """Factory called by the façade binder."""
    view = LegacyProgressView()
    register_implementation(context.component, context.variant_id, view)
    logger.debug("Registered legacy %s", context.component)
    return view
