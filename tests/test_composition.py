"""
Tests for the warnings surface of a parsed composition.
"""

import threading

from conftest import make_document
from lottiekit.model.composition import WarningSet


class TestWarnings:
    """Test warnings added after parsing."""

    def test_add_warning_deduplicates(self, parse_doc):
        composition = parse_doc(make_document())
        composition.add_warning("Missing font Roboto")
        composition.add_warning("Missing font Roboto")
        composition.add_warning("Missing font roboto")
        assert composition.warnings == ["Missing font Roboto", "Missing font roboto"]

    def test_keeps_parse_warnings_first(self, parse_doc):
        composition = parse_doc(make_document(v="4.4.0"))
        composition.add_warning("Renderer fallback")
        warnings = composition.warnings
        assert len(warnings) == 2
        assert "4.5.0" in warnings[0]
        assert warnings[1] == "Renderer fallback"

    def test_warnings_is_a_snapshot(self, parse_doc):
        composition = parse_doc(make_document())
        composition.add_warning("first")
        snapshot = composition.warnings
        snapshot.append("injected")
        snapshot.remove("first")
        assert composition.warnings == ["first"]

    def test_concurrent_adds_and_reads(self, parse_doc):
        composition = parse_doc(make_document())
        start = threading.Barrier(9)
        errors = []

        def writer(worker):
            start.wait()
            for i in range(200):
                # Every text is added by two workers
                composition.add_warning(f"warning {worker // 2}-{i}")

        def reader():
            start.wait()
            try:
                for _ in range(200):
                    warnings = composition.warnings
                    assert len(warnings) == len(set(warnings))
            except AssertionError as e:
                errors.append(e)

        threads = [threading.Thread(target=writer, args=(n,)) for n in range(8)]
        threads.append(threading.Thread(target=reader))
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=10)

        assert errors == []
        warnings = composition.warnings
        assert len(warnings) == 4 * 200
        assert len(set(warnings)) == len(warnings)


class TestWarningSet:
    def test_add_reports_new_text(self):
        warnings = WarningSet()
        assert warnings.add("a")
        assert not warnings.add("a")
        assert "a" in warnings
        assert len(warnings) == 1
