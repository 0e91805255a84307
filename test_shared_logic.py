"""Tests for the progress view shared logic library."""
# pylint: disable=missing-function-docstring

import re
from pathlib import Path

import pytest

from progress_view.shared import (
    DEFAULTS, PROPERTY_NAMES, UnknownPropertyError, apply_property, create_resource,
    normalize_color, normalize_property,
)

SHARED_DIR = Path(__file__).parent / "progress_view" / "shared"


class TestNormalizeColor:

    @pytest.mark.parametrize("value,expected", [
        ("#FA0", "#ffaa00"),
        ("00ff00", "#00ff00"),
        ("#336699", "#336699"),
        ((255, 0, 0), "#ff0000"),
        (0x336699, "#336699"),
        (None, None),
    ])
    def test_valid(self, value, expected):
        assert normalize_color(value) == expected

    @pytest.mark.parametrize("value", ["red", "#12345", (256, 0, 0), (1, 2), True, -1, 1.5])
    def test_invalid(self, value):
        with pytest.raises(ValueError):
            normalize_color(value)


class TestNormalizeProperty:

    def test_progress_clamped(self):
        assert normalize_property("progress", -3) == 0.0
        assert normalize_property("progress", 0.4) == 0.4
        assert normalize_property("progress", 7) == 1.0

    def test_progress_rejects_bool(self):
        with pytest.raises(ValueError):
            normalize_property("progress", True)

    def test_bool_strings(self):
        assert normalize_property("animating", "off") is False
        assert normalize_property("indeterminate", "YES") is True
        with pytest.raises(ValueError):
            normalize_property("animating", "sometimes")

    def test_unknown_property(self):
        with pytest.raises(UnknownPropertyError):
            normalize_property("opacity", 1.0)

    def test_unknown_property_is_key_error(self):
        assert issubclass(UnknownPropertyError, KeyError)

    def test_normalization_is_idempotent(self):
        for name, value in [("progress", 0.5), ("style", "spinner"),
                            ("track_tint_color", "#ABC"), ("animating", "true")]:
            once = normalize_property(name, value)
            assert normalize_property(name, once) == once


class TestResource:

    def test_defaults(self):
        assert create_resource() == DEFAULTS
        assert set(create_resource()) == set(PROPERTY_NAMES)

    def test_create_does_not_share_defaults(self):
        resource = create_resource()
        resource["progress"] = 0.7
        assert DEFAULTS["progress"] == 0.0

    def test_apply_is_pure(self):
        original = create_resource({"progress": 0.2})
        updated = apply_property(original, "progress", 0.8)
        assert original["progress"] == 0.2
        assert updated["progress"] == 0.8

    def test_indeterminate_resets_progress(self):
        resource = create_resource({"progress": 0.6})
        resource = apply_property(resource, "indeterminate", True)
        assert resource["progress"] == 0.0


class TestLeafDependency:
    """The shared root never reaches into a variant."""

    def test_no_variant_imports(self):
        variant_import = re.compile(r"(progress_view\.(legacy|modern)|from\s+\.\.(legacy|modern))")
        for py_file in SHARED_DIR.glob("*.py"):
            assert not variant_import.search(py_file.read_text()), py_file.name
