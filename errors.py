"""Exception classes for variant selection and binding."""

from typing import List, Optional


class VariantError(Exception):
    """Base error for archswitch."""

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(detail)


class ConfigurationError(VariantError):
    """Unresolvable or contradictory build configuration."""


class MissingVariantError(VariantError):
    """Requested variant's sources are absent."""

    def __init__(self, variant_id: str, missing_paths: List[str]) -> None:
        self.variant_id = variant_id
        self.missing_paths = missing_paths
        super().__init__(
            f"Variant '{variant_id}' is missing source paths: {', '.join(missing_paths)}"
        )


class InconsistentBindingError(VariantError):
    """Runtime marker selects a variant that was not built into the artifact."""

    def __init__(self, component: str, detected_variant: str,
                 compiled_variants: List[str]) -> None:
        self.component = component
        self.detected_variant = detected_variant
        self.compiled_variants = compiled_variants
        compiled = ", ".join(compiled_variants) or "none"
        super().__init__(
            f"Component '{component}': runtime selects variant '{detected_variant}' "
            f"but the artifact was built with: {compiled}. "
            f"Rebuild with a matching architecture flag."
        )


class MalformedMarkerError(VariantError):
    """Capability marker present with an unexpected type. Recovered inside the probe."""

    def __init__(self, marker_name: str, value_type: str) -> None:
        self.marker_name = marker_name
        self.value_type = value_type
        super().__init__(f"Capability marker '{marker_name}' has unexpected type {value_type}")


class VariantConformanceError(VariantError):
    """Variant factory returned a handle outside the component's capability set."""

    def __init__(self, variant_id: str, interface: str,
                 handle_type: Optional[str] = None) -> None:
        self.variant_id = variant_id
        self.interface = interface
        super().__init__(
            f"Variant '{variant_id}' returned {handle_type or 'a handle'} "
            f"which does not implement {interface}"
        )
