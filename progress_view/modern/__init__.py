"""Modern progress view variant."""

from .view import ModernProgressView, create_component

__all__ = ["ModernProgressView", "create_component"]
