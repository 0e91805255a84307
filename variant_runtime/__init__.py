"""
Runtime side of variant dispatch: capability probe and façade binder.

Usage:
    from variant_runtime import FacadeBinder
    binder = FacadeBinder.for_package_dir(Path(__file__).parent)
    handle = binder.resolve().handle
"""

from .binder import FacadeBinder
from .probe import (
    CapabilityProbe,
    GlobalMarkerProbe,
    MODERN_RUNTIME_MARKER,
    StaticProbe,
    get_probe,
)
from .registry import register_implementation, registered_variant

__all__ = [
    "CapabilityProbe",
    "FacadeBinder",
    "GlobalMarkerProbe",
    "MODERN_RUNTIME_MARKER",
    "StaticProbe",
    "get_probe",
    "register_implementation",
    "registered_variant",
]
