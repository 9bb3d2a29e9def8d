"""
Tests for pre-flight memory checks.
"""

from unittest.mock import patch

import pytest

from ontology_loader.core.memory import MemoryManager

AVAILABLE = 'ontology_loader.core.memory.MemoryManager.get_available_memory_mb'


@pytest.mark.unit
class TestCheckMemoryAvailable:
    """check_memory_available decisions."""

    def test_small_document_ok(self):
        with patch(AVAILABLE, return_value=8000.0):
            ok, message = MemoryManager.check_memory_available(1.0)
        assert ok
        assert "Memory OK" in message

    def test_over_size_cap(self):
        ok, message = MemoryManager.check_memory_available(600.0, max_document_mb=500)
        assert not ok
        assert "exceeds limit" in message

    def test_force_skips_checks(self):
        with patch(AVAILABLE, return_value=10.0):
            ok, message = MemoryManager.check_memory_available(600.0, max_document_mb=500, force=True)
        assert ok
        assert "forced" in message

    def test_insufficient_free_memory(self):
        with patch(AVAILABLE, return_value=100.0):
            ok, message = MemoryManager.check_memory_available(1.0)
        assert not ok
        assert "Insufficient free memory" in message

    def test_estimated_usage_over_threshold(self):
        # 200MB * 3.5 = 700MB estimated, 900MB * 0.7 = 630MB threshold
        with patch(AVAILABLE, return_value=900.0):
            ok, message = MemoryManager.check_memory_available(200.0)
        assert not ok
        assert "too large for available memory" in message

    def test_unknown_available_memory_proceeds(self):
        with patch(AVAILABLE, return_value=float('inf')):
            ok, message = MemoryManager.check_memory_available(10.0)
        assert ok
        assert "unavailable" in message


@pytest.mark.unit
class TestMemoryProbes:
    """psutil-backed readings."""

    def test_available_memory_is_positive(self):
        assert MemoryManager.get_available_memory_mb() > 0

    def test_psutil_failure_reports_infinity(self):
        with patch('ontology_loader.core.memory.psutil.virtual_memory', side_effect=OSError("no /proc")):
            assert MemoryManager.get_available_memory_mb() == float('inf')

    def test_process_usage(self):
        assert MemoryManager.get_memory_usage_mb() >= 0.0

    def test_log_memory_status_does_not_raise(self, caplog):
        with caplog.at_level('DEBUG', logger='ontology_loader.core.memory'):
            MemoryManager.log_memory_status("test")
        assert "[test] Memory status" in caplog.text
