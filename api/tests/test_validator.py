"""Tests for log entry validation."""

from api.src.validator import MISSING_FIELDS_ERROR, LogEntryValidator


class TestLogEntryValidator:
    def setup_method(self):
        self.validator = LogEntryValidator()

    def test_minimal_entry(self):
        assert self.validator.validate({"category": "exec", "action": "x"}) == (True, None)

    def test_full_entry(self):
        entry = {"category": "cost", "action": "model:usage", "details": {"raw": "..."},
                 "timestamp": "2026-10-17T09:00:00Z", "session_id": "s",
                 "duration_ms": 5, "cost": 0.5}
        assert self.validator.validate(entry) == (True, None)

    def test_missing_required(self):
        assert self.validator.validate({"category": "exec"}) == (False, MISSING_FIELDS_ERROR)
        assert self.validator.validate({"action": "x"}) == (False, MISSING_FIELDS_ERROR)

    def test_wrong_types(self):
        is_valid, message = self.validator.validate(
            {"category": "exec", "action": "x", "details": [], "cost": "free"})
        assert is_valid is False
        assert "details" in message
        assert "cost" in message

    def test_category_too_long(self):
        is_valid, _ = self.validator.validate({"category": "c" * 51, "action": "x"})
        assert is_valid is False

    def test_not_an_object(self):
        is_valid, message = self.validator.validate(["exec", "x"])
        assert is_valid is False
        assert "object" in message
