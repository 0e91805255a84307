"""Shared data structures for archswitch.

All TypedDicts and value types used across variant_build/, variant_runtime/
and the component packages.
"""

from enum import Enum
from typing import Any, Dict, List, NamedTuple, Optional, TypedDict


# =============================================================================
# Architecture Flag
# =============================================================================

class ArchitectureFlag(str, Enum):
    """Tri-state build flag. Unset builds fall back to the legacy variant."""
    UNSET = "unset"
    LEGACY = "legacy"
    MODERN = "modern"

    def effective(self) -> "ArchitectureFlag":
        """Collapse unset to legacy."""
        return ArchitectureFlag.LEGACY if self is ArchitectureFlag.UNSET else self


# =============================================================================
# Manifest Structures (loaded from variants.yaml)
# =============================================================================

class FlagSettings(TypedDict):
    """Where the architecture flag is read from."""
    env: str                 # e.g. "ARCHSWITCH_NEW_ARCH_ENABLED"
    property: str            # e.g. "newArchEnabled"
    properties_file: str     # e.g. "build.properties"


class VariantDescriptor(TypedDict):
    """Build-time record mapping a variant to its sources and activation."""
    id: str                                    # "legacy" or "modern"
    build_condition: List[str]                 # flag values that select it, e.g. ["unset", "legacy"]
    source_paths: List[str]                    # relative to the component package dir
    module: str                                # e.g. "progress_view.modern"
    required_capability_marker: Optional[str]  # marker name, None for the default variant


class ComponentManifest(TypedDict):
    """A logical component with its two variants."""
    component: str                   # e.g. "progress_view"
    package: str                     # import name of the component package
    interface: str                   # "module:Class" of the capability-set ABC
    shared_root: str                 # relative dir, e.g. "shared"
    flag: FlagSettings
    variants: List[VariantDescriptor]
    base_dir: str                    # absolute dir holding variants.yaml


# =============================================================================
# Generated Build Artifact
# =============================================================================

class BuildConfig(TypedDict):
    """Generated _build_config.json shipped inside the artifact package."""
    component: str
    flag: str                          # raw tri-state value, e.g. "unset"
    selected_variant: str
    compiled_variants: List[str]
    is_new_architecture_enabled: bool  # boolean field for downstream consumers
    strategy: str                      # "conditional" or "source_sets"
    target: str                        # "wheel", "sdist", "tree"
    source_roots: Dict[str, bool]      # root name -> included


class BuildReport(TypedDict):
    """Result of BuildVariantResolver.build()."""
    output_dir: str
    config: BuildConfig
    included_paths: List[str]
    elided_paths: List[str]


class FlagResolution(TypedDict):
    """Flag value and the raw inputs it was resolved from."""
    flag: str
    env_value: Optional[str]
    property_value: Optional[str]
    override: Optional[str]


# =============================================================================
# Runtime Values
# =============================================================================

class CapabilityProbeResult(NamedTuple):
    """Outcome of inspecting the process-global capability marker."""
    detected: bool
    marker_value: Any = None


class FacadeBinding(NamedTuple):
    """The bound implementation handle served to every caller."""
    active_variant_id: str
    handle: Any


class VariantContext(NamedTuple):
    """Passed to a variant module's create_component()."""
    component: str
    variant_id: str
    marker_value: Any = None
