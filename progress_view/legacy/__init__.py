"""Legacy progress view variant."""

from .view import LegacyProgressView, create_component

__all__ = ["LegacyProgressView", "create_component"]
