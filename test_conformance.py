"""Both variants expose the same capability set with the same behavior.

Behavior checks run unchanged against a legacy-bound and a
modern-bound binding; nothing in them branches on the variant id.
"""
# pylint: disable=missing-function-docstring,redefined-outer-name

import inspect
from pathlib import Path

import pytest

from progress_view.legacy.view import MAX_PENDING_COMMANDS, LegacyProgressView
from progress_view.shared import ProgressViewAPI, UnknownPropertyError, UnknownViewError
from variant_runtime import FacadeBinder, StaticProbe
from variant_runtime.registry import clear_registry

PROGRESS_VIEW_DIR = Path(__file__).parent / "progress_view"


@pytest.fixture(params=[False, True], ids=["legacy", "modern"])
def view(request):
    binder = FacadeBinder.for_package_dir(PROGRESS_VIEW_DIR, probe=StaticProbe(request.param))
    return binder.resolve().handle


def _public_methods(obj):
    return {
        name: inspect.signature(member)
        for name, member in inspect.getmembers(type(obj), inspect.isfunction)
        if not name.startswith("_") and name in ProgressViewAPI.__abstractmethods__
    }


class TestCapabilitySet:

    def test_implements_interface(self, view):
        assert isinstance(view, ProgressViewAPI)

    def test_same_signatures(self):
        legacy = FacadeBinder.for_package_dir(PROGRESS_VIEW_DIR, probe=StaticProbe(False))
        legacy_methods = _public_methods(legacy.resolve().handle)

        clear_registry()

        modern = FacadeBinder.for_package_dir(PROGRESS_VIEW_DIR, probe=StaticProbe(True))
        modern_methods = _public_methods(modern.resolve().handle)

        assert set(legacy_methods) == set(ProgressViewAPI.__abstractmethods__)
        assert legacy_methods == modern_methods


class TestBehavior:
    """Observable behavior callers rely on."""

    def test_create_with_defaults(self, view):
        tag = view.create()
        props = view.get_properties(tag)
        assert props["progress"] == 0.0
        assert props["style"] == "bar"
        assert props["indeterminate"] is False
        assert view.view_count() == 1

    def test_create_with_props(self, view):
        tag = view.create({"progress": 0.25, "progress_tint_color": "#F00"})
        props = view.get_properties(tag)
        assert props["progress"] == 0.25
        assert props["progress_tint_color"] == "#ff0000"

    def test_set_property(self, view):
        tag = view.create()
        view.set_property(tag, "progress", 0.5)
        view.set_property(tag, "progress", 2)
        view.set_property(tag, "style", "spinner")
        props = view.get_properties(tag)
        assert props["progress"] == 1.0
        assert props["style"] == "spinner"

    def test_tags_are_distinct(self, view):
        assert len({view.create() for _ in range(3)}) == 3
        assert view.view_count() == 3

    def test_returned_properties_are_copies(self, view):
        tag = view.create()
        view.get_properties(tag)["progress"] = 0.9
        assert view.get_properties(tag)["progress"] == 0.0

    def test_dispose(self, view):
        tag = view.create()
        view.dispose(tag)
        assert view.view_count() == 0
        with pytest.raises(UnknownViewError):
            view.get_properties(tag)
        with pytest.raises(UnknownViewError):
            view.dispose(tag)

    def test_unknown_tag(self, view):
        with pytest.raises(UnknownViewError):
            view.set_property(99, "progress", 0.1)

    def test_unknown_property_rejected_at_call(self, view):
        tag = view.create()
        with pytest.raises(UnknownPropertyError):
            view.set_property(tag, "opacity", 0.5)

    def test_invalid_value_rejected_at_call(self, view):
        tag = view.create()
        with pytest.raises(ValueError):
            view.set_property(tag, "progress_tint_color", "not-a-color")
        assert view.get_properties(tag)["progress_tint_color"] is None

    def test_invalid_initial_props(self, view):
        with pytest.raises(ValueError):
            view.create({"style": "ring"})
        assert view.view_count() == 0

    def test_same_script_same_result(self, view):
        tag = view.create({"progress": 0.3})
        view.set_property(tag, "indeterminate", True)
        view.set_property(tag, "track_tint_color", (0, 128, 255))
        view.set_property(tag, "animating", "false")
        assert view.get_properties(tag) == {
            "progress": 0.0,
            "indeterminate": True,
            "animating": False,
            "style": "bar",
            "progress_tint_color": None,
            "track_tint_color": "#0080ff",
        }

    def test_write_only_churn(self, view):
        for _ in range(3):
            tag = view.create()
            for i in range(1000):
                view.set_property(tag, "progress", i / 1000)
            view.dispose(tag)
        assert view.view_count() == 0
        assert view.get_properties(view.create()) == view.get_properties(view.create())


class TestLegacyQueue:
    """Pending legacy commands stay bounded without reads."""

    def test_queue_bounded_between_reads(self):
        view = LegacyProgressView()
        tag = view.create()
        for i in range(10000):
            view.set_property(tag, "progress", i / 10000)
            assert len(view._bridge) < MAX_PENDING_COMMANDS  # pylint: disable=protected-access

    def test_dispose_releases_view(self):
        view = LegacyProgressView()
        tag = view.create({"style": "spinner"})
        view.set_property(tag, "progress", 0.5)
        view.dispose(tag)
        assert len(view._bridge) == 0  # pylint: disable=protected-access
        assert view._views == {}  # pylint: disable=protected-access
