"""
Capability Prober.

The host runtime announces the modern implementation family by setting a
marker attribute on ``builtins`` before any application code runs. The
marker's name and accepted shapes live only in this module.
"""

import builtins
import logging
import threading
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Optional

from errors import MalformedMarkerError
from structures import CapabilityProbeResult

__all__ = [
    "CapabilityProbe",
    "GlobalMarkerProbe",
    "MODERN_RUNTIME_MARKER",
    "StaticProbe",
    "classify_marker",
    "get_probe",
    "read_global_marker",
    "reset_probes",
]

logger = logging.getLogger(__name__)

MODERN_RUNTIME_MARKER = "__archswitch_modern_runtime__"

MarkerReader = Callable[[str], Any]


def read_global_marker(marker_name: str) -> Any:
    """Read a marker from process-global scope. None if absent."""
    return getattr(builtins, marker_name, None)


def classify_marker(marker_name: str, value: Any) -> CapabilityProbeResult:
    """Turn a raw marker value into a probe result.

    Accepted shapes:
        None / False -> not detected
        True         -> detected
        callable     -> detected (runtime proxy, passed on as marker_value)

    Raises:
        MalformedMarkerError: any other type
    """
    if value is None or value is False:
        return CapabilityProbeResult(detected=False)
    if value is True or callable(value):
        return CapabilityProbeResult(detected=True, marker_value=value)
    raise MalformedMarkerError(marker_name, type(value).__name__)


class CapabilityProbe(ABC):
    """Reports which implementation family is live in this process."""

    @abstractmethod
    def probe(self) -> CapabilityProbeResult:
        """Return the probe result. Never raises."""
        ...


class GlobalMarkerProbe(CapabilityProbe):
    """Probe backed by a process-global marker, memoized for the process lifetime."""

    def __init__(self, marker_name: str = MODERN_RUNTIME_MARKER,
                 reader: Optional[MarkerReader] = None) -> None:
        self.marker_name = marker_name
        self._reader = reader or read_global_marker
        self._lock = threading.Lock()
        self._result: Optional[CapabilityProbeResult] = None

    def probe(self) -> CapabilityProbeResult:
        result = self._result
        if result is not None:
            return result
        with self._lock:
            if self._result is None:
                self._result = self._inspect()
            return self._result

    def _inspect(self) -> CapabilityProbeResult:
        try:
            result = classify_marker(self.marker_name, self._reader(self.marker_name))
        except MalformedMarkerError as e:
            logger.warning("%s; using the default variant", e.detail)
            result = CapabilityProbeResult(detected=False)
        except Exception as e:
            logger.warning("Reading marker %s failed: %s; using the default variant",
                           self.marker_name, e)
            result = CapabilityProbeResult(detected=False)
        logger.debug("Probed %s: detected=%s", self.marker_name, result.detected)
        return result


class StaticProbe(CapabilityProbe):
    """Fixed probe result, for hosts that know their runtime and for tests."""

    def __init__(self, detected: bool, marker_value: Any = None) -> None:
        self._result = CapabilityProbeResult(detected=detected,
                                             marker_value=marker_value if detected else None)

    def probe(self) -> CapabilityProbeResult:
        return self._result


# Shared per marker name so every component in the process sees one result
_PROBES: Dict[str, GlobalMarkerProbe] = {}
_PROBES_LOCK = threading.Lock()


def get_probe(marker_name: str = MODERN_RUNTIME_MARKER) -> GlobalMarkerProbe:
    """Process-wide probe for a marker name."""
    with _PROBES_LOCK:
        probe = _PROBES.get(marker_name)
        if probe is None:
            probe = GlobalMarkerProbe(marker_name)
            _PROBES[marker_name] = probe
        return probe


def reset_probes() -> None:
    """Drop shared probes. Test isolation only."""
    with _PROBES_LOCK:
        _PROBES.clear()
