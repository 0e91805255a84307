"""Source-set inclusion: disjoint shared/legacy/modern roots.

Used where the artifact cannot elide code (sdist) or where the downstream
build tool picks roots from the generated config (tree).
"""

from pathlib import PurePosixPath
from typing import List

from errors import ConfigurationError
from structures import ComponentManifest, VariantDescriptor

from .base import InclusionStrategy


def _overlaps(a: str, b: str) -> bool:
    pa, pb = PurePosixPath(a), PurePosixPath(b)
    return pa == pb or pa in pb.parents or pb in pa.parents


class SourceSetStrategy(InclusionStrategy):
    """Selects whole source roots.

    Args:
        target: Artifact target name
        supports_root_exclusion: False packages every variant root and
            leaves exclusivity to the runtime binder
    """

    name = "source_sets"

    def __init__(self, target: str, supports_root_exclusion: bool = True) -> None:
        super().__init__(target)
        self.supports_root_exclusion = supports_root_exclusion

    def validate_layout(self, manifest: ComponentManifest) -> None:
        """Roots must be disjoint: one shared, one per variant."""
        roots = [("shared", manifest["shared_root"])]
        for variant in manifest["variants"]:
            roots.extend((variant["id"], p) for p in variant["source_paths"])

        for i, (owner_a, root_a) in enumerate(roots):
            for owner_b, root_b in roots[i + 1:]:
                if owner_a != owner_b and _overlaps(root_a, root_b):
                    raise ConfigurationError(
                        f"Source roots overlap: {owner_a}:{root_a} and {owner_b}:{root_b}"
                    )

    def included_variants(self, manifest: ComponentManifest,
                          selected: VariantDescriptor) -> List[VariantDescriptor]:
        if self.supports_root_exclusion:
            return [selected]
        return list(manifest["variants"])
