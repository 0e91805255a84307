"""Tests for the capability prober."""
# pylint: disable=missing-function-docstring

import builtins
import logging
import threading

import pytest

from errors import MalformedMarkerError
from variant_runtime.probe import (
    MODERN_RUNTIME_MARKER, GlobalMarkerProbe, StaticProbe, classify_marker, get_probe,
)


class CountingReader:
    """Marker reader that records how often it was called."""

    def __init__(self, value):
        self.value = value
        self.calls = 0
        self._lock = threading.Lock()

    def __call__(self, marker_name):
        with self._lock:
            self.calls += 1
        return self.value


# -----------------------------------------------------------------------
# Classification
# -----------------------------------------------------------------------

class TestClassifyMarker:
    """Marker shapes accepted by the probe."""

    @pytest.mark.parametrize("value", [None, False])
    def test_absent(self, value):
        assert classify_marker("m", value).detected is False

    def test_true(self):
        result = classify_marker("m", True)
        assert result.detected is True
        assert result.marker_value is True

    def test_callable_proxy(self):
        proxy = lambda name: None  # noqa: E731
        result = classify_marker("m", proxy)
        assert result.detected is True
        assert result.marker_value is proxy

    @pytest.mark.parametrize("value", ["yes", 1, 0, {"enabled": True}, ["proxy"]])
    def test_malformed(self, value):
        with pytest.raises(MalformedMarkerError) as exc_info:
            classify_marker("m", value)
        assert exc_info.value.value_type == type(value).__name__


# -----------------------------------------------------------------------
# GlobalMarkerProbe
# -----------------------------------------------------------------------

class TestGlobalMarkerProbe:
    """Memoized probe over a process-global marker."""

    def test_reads_marker_once(self):
        reader = CountingReader(True)
        probe = GlobalMarkerProbe("m", reader=reader)
        results = [probe.probe() for _ in range(10)]
        assert reader.calls == 1
        assert all(r is results[0] for r in results)

    def test_result_not_refreshed_after_marker_changes(self):
        reader = CountingReader(None)
        probe = GlobalMarkerProbe("m", reader=reader)
        assert probe.probe().detected is False
        reader.value = True
        assert probe.probe().detected is False

    def test_concurrent_first_probe_reads_once(self):
        reader = CountingReader(True)
        probe = GlobalMarkerProbe("m", reader=reader)
        barrier = threading.Barrier(8)
        results = []

        def worker():
            barrier.wait()
            results.append(probe.probe())

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert reader.calls == 1
        assert len(results) == 8
        assert all(r.detected for r in results)

    def test_malformed_marker_recovered(self, caplog):
        probe = GlobalMarkerProbe("m", reader=CountingReader("enabled"))
        with caplog.at_level(logging.WARNING, logger="variant_runtime.probe"):
            result = probe.probe()
        assert result.detected is False
        assert result.marker_value is None
        assert "unexpected type str" in caplog.text

    def test_failing_reader_recovered(self, caplog):
        def reader(marker_name):
            raise RuntimeError("host not ready")

        probe = GlobalMarkerProbe("m", reader=reader)
        with caplog.at_level(logging.WARNING, logger="variant_runtime.probe"):
            result = probe.probe()
        assert result.detected is False
        assert "host not ready" in caplog.text
        assert probe.probe() is result

    def test_default_reader_absent(self):
        assert GlobalMarkerProbe().probe().detected is False

    def test_default_reader_present(self, monkeypatch):
        monkeypatch.setattr(builtins, MODERN_RUNTIME_MARKER, True, raising=False)
        assert GlobalMarkerProbe().probe().detected is True


class TestSharedProbe:

    def test_one_probe_per_marker(self):
        assert get_probe() is get_probe(MODERN_RUNTIME_MARKER)
        assert get_probe("other") is not get_probe()


class TestStaticProbe:

    def test_detected(self):
        assert StaticProbe(True, marker_value="proxy").probe().marker_value == "proxy"

    def test_not_detected_drops_marker_value(self):
        result = StaticProbe(False, marker_value="proxy").probe()
        assert result.detected is False
        assert result.marker_value is None
