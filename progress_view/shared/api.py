"""
Progress view capability set.

Both variants implement this interface; callers hold a ProgressViewAPI
and never check which variant is behind it.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from .logic import ProgressResource

__all__ = ["ProgressViewAPI"]


class ProgressViewAPI(ABC):
    """
    Abstract interface for progress view implementations.

    Implementations: LegacyProgressView, ModernProgressView
    """

    @abstractmethod
    def create(self, props: Optional[Dict[str, Any]] = None) -> int:
        """Create a view and return its tag.

        Args:
            props: Initial properties, e.g. {"progress": 0.5, "style": "bar"}

        Raises:
            UnknownPropertyError, ValueError: invalid initial properties
        """
        ...

    @abstractmethod
    def set_property(self, tag: int, name: str, value: Any) -> None:
        """Apply one named property to a view.

        Raises:
            UnknownViewError: tag not live
            UnknownPropertyError: name not a progress view property
            ValueError: value can't be normalized
        """
        ...

    @abstractmethod
    def get_properties(self, tag: int) -> ProgressResource:
        """Current normalized properties of a view (a copy)."""
        ...

    @abstractmethod
    def dispose(self, tag: int) -> None:
        """Destroy a view. Its tag becomes unknown."""
        ...

    @abstractmethod
    def view_count(self) -> int:
        """Number of live views."""
        ...
