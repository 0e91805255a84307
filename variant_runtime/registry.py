"""Process-wide registry of bound component implementations."""

import threading
from typing import Any, Dict, Optional, Tuple

from errors import ConfigurationError

_lock = threading.Lock()
_implementations: Dict[str, Tuple[str, Any]] = {}


def register_implementation(component: str, variant_id: str, handle: Any) -> None:
    """Register a component's implementation under its global name.

    Raises:
        ConfigurationError: the component already has an implementation
    """
    with _lock:
        existing = _implementations.get(component)
        if existing is not None:
            raise ConfigurationError(
                f"Component '{component}' already registered by variant '{existing[0]}'"
            )
        _implementations[component] = (variant_id, handle)


def registered_variant(component: str) -> Optional[str]:
    with _lock:
        entry = _implementations.get(component)
        return entry[0] if entry else None


def clear_registry() -> None:
    """Forget all registrations. Test isolation only."""
    with _lock:
        _implementations.clear()
