"""
Progress view component.

Usage: from progress_view import ProgressView

ProgressView is bound on first access to whichever variant the running
process supports, and stays bound for the process lifetime.
"""

from pathlib import Path

from variant_runtime import FacadeBinder

__all__ = ["ProgressView", "binder"]

binder = FacadeBinder.for_package_dir(Path(__file__).parent)


def __getattr__(name: str):
    if name == "ProgressView":
        return binder.resolve().handle
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
