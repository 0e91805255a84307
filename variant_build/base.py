"""
Artifact inclusion strategy interface.

A strategy decides which variant source roots land in a built artifact
and checks the staged artifact before it is moved into place.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import List

from structures import ComponentManifest, VariantDescriptor

__all__ = ["InclusionStrategy"]


class InclusionStrategy(ABC):
    """
    Abstract interface for per-target artifact inclusion.

    Implementations: ConditionalStrategy, SourceSetStrategy
    """

    name: str = ""

    def __init__(self, target: str) -> None:
        self.target = target

    @abstractmethod
    def included_variants(self, manifest: ComponentManifest,
                          selected: VariantDescriptor) -> List[VariantDescriptor]:
        """
        Variants whose sources go into the artifact.

        Args:
            manifest: The component being built
            selected: The variant whose build condition holds for the flag

        Returns:
            Descriptors in manifest order. Always contains ``selected``.
        """
        ...

    def validate_layout(self, manifest: ComponentManifest) -> None:
        """Check the component's source layout before anything is copied.

        Raises:
            ConfigurationError: layout unusable for this strategy
        """
        return None

    def verify(self, staged_package: Path, manifest: ComponentManifest,
               elided: List[VariantDescriptor]) -> None:
        """
        Check the staged artifact.

        Args:
            staged_package: Package directory inside the staging area
            manifest: The component being built
            elided: Variants left out of the artifact

        Raises:
            ConfigurationError: artifact still depends on an elided variant
        """
        return None
