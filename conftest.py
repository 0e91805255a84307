"""Shared pytest fixtures."""
# pylint: disable=missing-function-docstring

import builtins
import shutil
from pathlib import Path

import pytest

from config_utils import BUILD_CONFIG_FILENAME, DEFAULT_FLAG_ENV
from variant_runtime.probe import MODERN_RUNTIME_MARKER, reset_probes
from variant_runtime.registry import clear_registry

REPO_ROOT = Path(__file__).parent
PROGRESS_VIEW_DIR = REPO_ROOT / "progress_view"


@pytest.fixture(autouse=True)
def clean_process_state(monkeypatch):
    """Each test starts with no marker, no flag and no registrations."""
    monkeypatch.delattr(builtins, MODERN_RUNTIME_MARKER, raising=False)
    monkeypatch.delenv(DEFAULT_FLAG_ENV, raising=False)
    clear_registry()
    reset_probes()
    yield
    clear_registry()
    reset_probes()


@pytest.fixture
def component_dir(tmp_path):
    """Writable copy of the progress_view package sources."""
    target = tmp_path / "src" / "progress_view"
    shutil.copytree(
        PROGRESS_VIEW_DIR, target,
        ignore=shutil.ignore_patterns("__pycache__", "*.pyc", BUILD_CONFIG_FILENAME),
    )
    return target
