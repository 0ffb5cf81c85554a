"""
Parcel and Irrigation Event Tests
=================================
Tests for TreeProfile, ParcelConfig builders and IrrigationEvent lifecycle.
"""

from datetime import datetime, time, timedelta, timezone

import pytest

from smartolive.domain.exceptions import ConflictError, ValidationError
from smartolive.domain.irrigation_event import IrrigationEvent
from smartolive.domain.moisture import MoistureRange
from smartolive.domain.parcel import ParcelConfig, TreeProfile
from smartolive.domain.recommendation import Recommendation
from smartolive.domain.time_window import TimeWindow
from smartolive.enums.common import IrrigationType, ParcelStatus, RecommendationLevel, SoilType


@pytest.fixture
def profile():
    return TreeProfile("Koroneiki", SoilType.CALCAREOUS, age_years=12, base_water_need_liters=25)


class TestTreeProfile:
    """Tests for TreeProfile validation."""

    def test_soil_from_string(self):
        """Test coercion of soil names."""
        assert TreeProfile("Picual", "sandy", 5, 10).soil_type is SoilType.SANDY

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"age_years": -1},
            {"base_water_need_liters": 0},
            {"variety": "  "},
            {"soil_type": "peat"},
        ],
    )
    def test_invalid_profiles(self, kwargs):
        """Test that invalid profiles fail fast."""
        values = {"variety": "Picual", "soil_type": SoilType.LOAMY, "age_years": 5, "base_water_need_liters": 10}
        values.update(kwargs)
        with pytest.raises(ValidationError):
            TreeProfile(**values)


class TestParcelConfig:
    """Tests for ParcelConfig.create and immutability."""

    def test_create(self, profile, clock, now):
        """Test the validated builder."""
        parcel = ParcelConfig.create(" South Terrace ", profile, MoistureRange(30, 60), clock=clock)
        assert parcel.parcel_id.startswith("P-")
        assert parcel.name == "South Terrace"
        assert parcel.max_daily_duration_minutes == 60
        assert parcel.status is ParcelStatus.IDLE
        assert parcel.created_at == now

    def test_blank_name_rejected(self, profile):
        """Test that a parcel requires a name."""
        with pytest.raises(ValidationError):
            ParcelConfig.create("   ", profile, MoistureRange(30, 60))

    def test_non_positive_duration_rejected(self, profile):
        """Test the daily duration budget."""
        with pytest.raises(ValidationError):
            ParcelConfig.create("North", profile, MoistureRange(30, 60), max_daily_duration_minutes=0)

    def test_status_change_returns_new_instance(self, make_parcel):
        """Test that status is the only evolving field."""
        parcel = make_parcel()
        irrigating = parcel.with_status(ParcelStatus.IRRIGATING)
        assert irrigating.status is ParcelStatus.IRRIGATING
        assert parcel.status is ParcelStatus.IDLE
        with pytest.raises(AttributeError):
            parcel.status = ParcelStatus.LOCKED

    def test_windows(self, make_parcel, morning_window):
        """Test window membership for restricted and unrestricted parcels."""
        at_seven = datetime(2024, 6, 15, 7, 0, tzinfo=timezone.utc)
        at_noon = datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc)
        unrestricted = make_parcel()
        assert unrestricted.is_irrigation_allowed_at(at_noon)
        restricted = unrestricted.with_window(morning_window)
        assert restricted.is_irrigation_allowed_at(at_seven)
        assert not restricted.is_irrigation_allowed_at(at_noon)
        evening = restricted.with_window(TimeWindow(time(11, 0), time(13, 0)))
        assert evening.is_irrigation_allowed_now(lambda: at_noon)

    def test_windows_coerced_to_tuple(self, profile, morning_window):
        """Test that window lists are frozen."""
        parcel = ParcelConfig("P-9", "Nine", profile, MoistureRange(30, 60), allowed_windows=[morning_window])
        assert parcel.allowed_windows == (morning_window,)


class TestIrrigationEvent:
    """Tests for IrrigationEvent lifecycle."""

    def test_running_event(self, now):
        """Test that an open event has no duration."""
        event = IrrigationEvent("P-1", now, 120.0, IrrigationType.MANUAL, triggered_by="operator")
        assert event.is_active
        assert event.duration_minutes is None

    def test_complete(self, now):
        """Test completion with remark and duration."""
        event = IrrigationEvent("P-1", now, 120.0)
        event.complete("finished normally", at=now + timedelta(minutes=12))
        assert not event.is_active
        assert event.duration_minutes == pytest.approx(12.0)
        assert event.remark == "finished normally"

    def test_complete_twice(self, now):
        """Test that a completed event cannot be completed again."""
        event = IrrigationEvent("P-1", now, 50.0)
        event.complete(at=now + timedelta(minutes=1))
        with pytest.raises(ConflictError):
            event.complete(at=now + timedelta(minutes=2))

    def test_invalid_events(self, now):
        """Test negative liters and reversed times."""
        with pytest.raises(ValidationError):
            IrrigationEvent("P-1", now, -1.0)
        with pytest.raises(ValidationError):
            IrrigationEvent("P-1", now, 10.0, end_time=now - timedelta(minutes=5))

    def test_trigger_from_string(self, now):
        """Test coercion of trigger labels."""
        assert IrrigationEvent("P-1", now, 10.0, "fallback").trigger is IrrigationType.FALLBACK


class TestRecommendation:
    """Tests for the Recommendation value object."""

    def test_skip(self, now):
        """Test the no-irrigation factory."""
        rec = Recommendation.skip(now, ["Moisture 45% within target range 30-60%"])
        assert rec.level is RecommendationLevel.NONE
        assert not rec.should_irrigate
        assert rec.reasons == ("Moisture 45% within target range 30-60%",)

    def test_negative_liters(self, now):
        """Test that negative liters are rejected."""
        with pytest.raises(ValidationError):
            Recommendation(now, -0.1, RecommendationLevel.NORMAL)

    def test_to_dict(self, now):
        """Test serialization."""
        data = Recommendation(now, 12.5, "normal", ["a", "b"]).to_dict()
        assert data["level"] == "normal"
        assert data["should_irrigate"] is True
        assert data["reasons"] == ["a", "b"]
