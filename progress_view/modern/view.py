"""Modern progress view: properties are applied synchronously."""

import itertools
import logging
import threading
from typing import Any, Dict, Optional

from progress_view.shared import (
    ProgressResource, ProgressViewAPI, UnknownViewError, apply_property, create_resource,
)
from structures import VariantContext
from variant_runtime import register_implementation

logger = logging.getLogger(__name__)


class ModernProgressView(ProgressViewAPI):
    """Holds resources directly; no queue between caller and host.

    Args:
        runtime: Host runtime proxy from the capability marker, or None
    """

    def __init__(self, runtime: Any = None) -> None:
        self.runtime = runtime
        self._views: Dict[int, ProgressResource] = {}
        self._tags = itertools.count(1)
        self._lock = threading.Lock()

    def _get(self, tag: int) -> ProgressResource:
        try:
            return self._views[tag]
        except KeyError:
            raise UnknownViewError(tag) from None

    def create(self, props: Optional[Dict[str, Any]] = None) -> int:
        resource = create_resource(props)
        with self._lock:
            tag = next(self._tags)
            self._views[tag] = resource
        return tag

    def set_property(self, tag: int, name: str, value: Any) -> None:
        with self._lock:
            self._views[tag] = apply_property(self._get(tag), name, value)

    def get_properties(self, tag: int) -> ProgressResource:
        with self._lock:
            return dict(self._get(tag))  # type: ignore[return-value]

    def dispose(self, tag: int) -> None:
        with self._lock:
            self._get(tag)
            del self._views[tag]

    def view_count(self) -> int:
        with self._lock:
            return len(self._views)


def create_component(context: VariantContext) -> ModernProgressView:
    """Factory called by the façade binder."""
    runtime = context.marker_value if callable(context.marker_value) else None
    view = ModernProgressView(runtime=runtime)
    register_implementation(context.component, context.variant_id, view)
    logger.debug("Registered modern %s", context.component)
    return view
