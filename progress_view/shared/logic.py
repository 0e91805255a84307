"""Implementation-agnostic progress view logic used by both variants.

Everything here is pure: resources are plain dicts and every update
returns a new resource.
"""

import re
from typing import Any, Callable, Dict, Optional, Tuple, TypedDict


class ProgressResource(TypedDict):
    """Normalized state of one progress view."""
    progress: float                      # 0.0 - 1.0
    indeterminate: bool
    animating: bool
    style: str                           # "bar" or "spinner"
    progress_tint_color: Optional[str]   # "#rrggbb" or None
    track_tint_color: Optional[str]


STYLES = ("bar", "spinner")

DEFAULTS: ProgressResource = {
    "progress": 0.0,
    "indeterminate": False,
    "animating": True,
    "style": "bar",
    "progress_tint_color": None,
    "track_tint_color": None,
}

_HEX_COLOR = re.compile(r'^#?([0-9a-fA-F]{3}|[0-9a-fA-F]{6})$')


class UnknownPropertyError(KeyError):
    """Property name not part of the progress view."""


class UnknownViewError(KeyError):
    """View tag never created or already disposed."""


# =============================================================================
# Value Normalization
# =============================================================================

def normalize_progress(value: Any) -> float:
    """Clamp to [0, 1]. Bools are rejected."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"progress must be a number, got {type(value).__name__}")
    return min(1.0, max(0.0, float(value)))


def normalize_bool(value: Any) -> bool:
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("1", "true", "yes", "on"):
            return True
        if lowered in ("0", "false", "no", "off", ""):
            return False
        raise ValueError(f"not a boolean: {value!r}")
    return bool(value)


def normalize_style(value: Any) -> str:
    if value not in STYLES:
        raise ValueError(f"style must be one of {STYLES}, got {value!r}")
    return value


def normalize_color(value: Any) -> Optional[str]:
    """Normalize a color to lowercase ``#rrggbb``.

    Examples:
        "#FA0" -> "#ffaa00"
        "00ff00" -> "#00ff00"
        (255, 0, 0) -> "#ff0000"
        0x336699 -> "#336699"
        None -> None
    """
    if value is None:
        return None
    if isinstance(value, str):
        match = _HEX_COLOR.match(value.strip())
        if not match:
            raise ValueError(f"invalid color: {value!r}")
        digits = match.group(1).lower()
        if len(digits) == 3:
            digits = "".join(c * 2 for c in digits)
        return "#" + digits
    if isinstance(value, tuple) and len(value) == 3:
        if not all(isinstance(c, int) and 0 <= c <= 255 for c in value):
            raise ValueError(f"invalid color: {value!r}")
        return "#{:02x}{:02x}{:02x}".format(*value)
    if isinstance(value, int) and not isinstance(value, bool) and 0 <= value <= 0xFFFFFF:
        return f"#{value:06x}"
    raise ValueError(f"invalid color: {value!r}")


_NORMALIZERS: Dict[str, Callable[[Any], Any]] = {
    "progress": normalize_progress,
    "indeterminate": normalize_bool,
    "animating": normalize_bool,
    "style": normalize_style,
    "progress_tint_color": normalize_color,
    "track_tint_color": normalize_color,
}

PROPERTY_NAMES: Tuple[str, ...] = tuple(_NORMALIZERS)


def normalize_property(name: str, value: Any) -> Any:
    """Validate a property name and normalize its value.

    Raises:
        UnknownPropertyError: name is not a progress view property
        ValueError: value can't be normalized
    """
    normalizer = _NORMALIZERS.get(name)
    if normalizer is None:
        raise UnknownPropertyError(name)
    return normalizer(value)


# =============================================================================
# Resource Construction
# =============================================================================

def create_resource(props: Optional[Dict[str, Any]] = None) -> ProgressResource:
    """Construct a resource from defaults plus initial properties."""
    resource: ProgressResource = dict(DEFAULTS)  # type: ignore[assignment]
    for name, value in (props or {}).items():
        resource = apply_property(resource, name, value)
    return resource


def apply_property(resource: ProgressResource, name: str, value: Any) -> ProgressResource:
    """Return a copy of resource with one named property applied.

    Setting indeterminate turns the determinate progress back to 0.
    """
    updated: ProgressResource = dict(resource)  # type: ignore[assignment]
    updated[name] = normalize_property(name, value)  # type: ignore[literal-required]
    if name == "indeterminate" and updated["indeterminate"]:
        updated["progress"] = 0.0
    return updated
