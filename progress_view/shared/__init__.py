"""Shared progress view logic. Never imports a variant."""

from .api import ProgressViewAPI
from .logic import (
    DEFAULTS,
    PROPERTY_NAMES,
    ProgressResource,
    UnknownPropertyError,
    UnknownViewError,
    apply_property,
    create_resource,
    normalize_color,
    normalize_property,
)

__all__ = [
    "DEFAULTS",
    "PROPERTY_NAMES",
    "ProgressResource",
    "ProgressViewAPI",
    "UnknownPropertyError",
    "UnknownViewError",
    "apply_property",
    "create_resource",
    "normalize_color",
    "normalize_property",
]
