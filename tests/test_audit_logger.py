"""
Audit Logger Tests
==================
Tests for the JSON decision audit trail.
"""

import json
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler

import pytest

from infrastructure.logging.audit import AuditLogger
from smartolive.domain.recommendation import Recommendation
from smartolive.enums.common import RecommendationLevel


@pytest.fixture
def audit(tmp_path):
    logger = AuditLogger(str(tmp_path / "logs" / "audit.log"))
    yield logger
    logger.close()


def _lines(audit):
    for handler in audit.logger.handlers:
        handler.flush()
    return audit.log_path.read_text(encoding="utf-8").splitlines()


def _records(audit):
    return [json.loads(line.split(" | ", 2)[2]) for line in _lines(audit)]


def _file_handlers(audit):
    return [
        handler
        for handler in audit.logger.handlers
        if isinstance(handler, RotatingFileHandler) and handler.baseFilename == str(audit.log_path.absolute())
    ]


class TestAuditLogger:
    """Tests for AuditLogger."""

    def test_creates_directory(self, audit):
        """Test that the log directory is created."""
        assert audit.log_path.parent.is_dir()

    def test_log_recommendation(self, audit, now):
        """Test the recommendation record."""
        rec = Recommendation(now, 30.0, RecommendationLevel.NORMAL, ("Base water need: 20L",))
        audit.log_recommendation("P-1", rec)
        record = _records(audit)[-1]
        assert record["action"] == "recommend"
        assert record["resource"] == "parcel:P-1"
        assert record["outcome"] == "irrigate"
        assert record["meta"]["level"] == "normal"
        assert record["meta"]["reasons"] == ["Base water need: 20L"]

    def test_skip_outcome(self, audit, now):
        """Test that zero-liter decisions are recorded as skips."""
        audit.log_recommendation("P-2", Recommendation.skip(now, ["Frost risk: -2°C"]))
        assert _records(audit)[-1]["outcome"] == "skip"

    def test_timestamp_is_utc(self, audit, now):
        """Test that the Z-suffixed timestamp really is UTC."""
        audit.log_recommendation("P-1", Recommendation.skip(now, ["x"]))
        stamp = _lines(audit)[-1].split(" | ", 1)[0]
        assert stamp.endswith("Z")
        logged = datetime.strptime(stamp[:-1], "%Y-%m-%dT%H:%M:%S").replace(tzinfo=timezone.utc)
        assert abs((datetime.now(timezone.utc) - logged).total_seconds()) < 120

    def test_no_duplicate_handlers(self, audit):
        """Test that a second logger on the same path reuses the file handler."""
        AuditLogger(str(audit.log_path))
        assert len(_file_handlers(audit)) == 1

    def test_separate_files_stay_separate(self, tmp_path, now):
        """Test that two trails never receive each other's records."""
        first = AuditLogger(str(tmp_path / "a.log"))
        second = AuditLogger(str(tmp_path / "b.log"))
        try:
            first.log_recommendation("P-A", Recommendation.skip(now, ["a"]))
            second.log_recommendation("P-B", Recommendation.skip(now, ["b"]))
            assert [r["resource"] for r in _records(first)] == ["parcel:P-A"]
            assert [r["resource"] for r in _records(second)] == ["parcel:P-B"]
        finally:
            first.close()
            second.close()

    def test_close_leaves_other_trails_open(self, tmp_path, now):
        """Test that closing one logger does not detach another."""
        first = AuditLogger(str(tmp_path / "a.log"))
        second = AuditLogger(str(tmp_path / "b.log"))
        first.close()
        second.log_recommendation("P-B", Recommendation.skip(now, ["b"]))
        assert len(_records(second)) == 1
        second.close()
