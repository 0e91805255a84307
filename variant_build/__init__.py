"""
Build Variant Resolver.

Usage:
    from variant_build import BuildVariantResolver, create_strategy
    resolver = BuildVariantResolver(manifest, create_strategy("wheel"))
    resolver.build("dist/")
"""

from errors import ConfigurationError

from .base import InclusionStrategy
from .common import condition_holds, parse_flag, read_architecture_flag, select_variant
from .resolver import BuildVariantResolver

__all__ = [
    "BuildVariantResolver",
    "InclusionStrategy",
    "TARGETS",
    "condition_holds",
    "create_strategy",
    "parse_flag",
    "read_architecture_flag",
    "select_variant",
]

# target -> strategy used to produce it
TARGETS = {
    "wheel": "conditional",   # unselected variant elided
    "tree": "source_sets",    # disjoint roots, only the selected one built
    "sdist": "source_sets",   # disjoint roots, every root shipped
}


def create_strategy(target: str) -> InclusionStrategy:
    """Create the inclusion strategy for an artifact target."""
    if target == "wheel":
        from .conditional import ConditionalStrategy  # pylint: disable=import-outside-toplevel
        return ConditionalStrategy(target)
    if target in ("tree", "sdist"):
        from .source_sets import SourceSetStrategy  # pylint: disable=import-outside-toplevel
        return SourceSetStrategy(target, supports_root_exclusion=(target == "tree"))
    raise ConfigurationError(
        f"Unsupported build target: {target}. "
        f"Supported: {', '.join(sorted(TARGETS))}."
    )
