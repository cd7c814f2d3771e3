"""
Tests for domain models.
"""

import pytest

from showingplanner.domain.models import (
    AppointmentRequest,
    BusinessHoursRule,
    TimeSlot,
    format_clock,
    parse_clock,
)


class TestClockHelpers:
    """Tests for HH:MM parsing and formatting."""

    def test_parse_clock(self):
        assert parse_clock("00:00") == 0
        assert parse_clock("09:30") == 570
        assert parse_clock(" 23:59 ") == 23 * 60 + 59

    @pytest.mark.parametrize("value", ["24:00", "9", "09:60", "ab:cd", "", "09:00:00"])
    def test_parse_clock_rejects_invalid(self, value):
        with pytest.raises(ValueError, match="expected HH:MM"):
            parse_clock(value)

    def test_format_clock_pads(self):
        assert format_clock(0) == "00:00"
        assert format_clock(9 * 60 + 5) == "09:05"


class TestBusinessHoursRule:
    """Tests for BusinessHoursRule."""

    def test_minutes(self):
        rule = BusinessHoursRule(day_of_week=1, is_open=True, open_time="08:30", close_time="17:00")

        assert rule.open_minute() == 510
        assert rule.close_minute() == 1020


class TestTimeSlot:
    """Tests for TimeSlot."""

    def test_label_and_duration(self):
        slot = TimeSlot(start_minute=600, end_minute=660)

        assert slot.start == "10:00"
        assert slot.end == "11:00"
        assert slot.label == "10:00 - 11:00"
        assert str(slot) == "10:00 - 11:00"
        assert slot.duration_minutes() == 60

    def test_parse_label(self):
        assert TimeSlot.parse("09:00 - 10:00") == TimeSlot(start_minute=540, end_minute=600)

    def test_parse_without_spaces(self):
        assert TimeSlot.parse("09:00-10:00").label == "09:00 - 10:00"

    def test_empty_window_raises(self):
        """Test that a slot ending before it starts raises ValueError."""
        with pytest.raises(ValueError, match="must be before"):
            TimeSlot(start_minute=600, end_minute=600)

    def test_malformed_label_raises(self):
        with pytest.raises(ValueError):
            TimeSlot.parse("09:00")


class TestAppointmentRequest:
    """Tests for the appointment payload."""

    def test_individual_payload(self):
        request = AppointmentRequest(property_id="p1", date="2024-11-25", time="10:00")

        assert request.to_payload() == {
            "propertyId": "p1",
            "date": "2024-11-25",
            "time": "10:00",
            "appointmentMode": "individual",
            "appointmentType": "in-person",
            "presentationCardId": None,
            "notes": "",
        }

    def test_tour_payload_carries_group_id(self):
        request = AppointmentRequest(
            property_id="p2",
            date="2024-11-25",
            time="10:30",
            appointment_mode="tour",
            presentation_card_id="card-7",
            notes="Bring keys",
            tour_group_id="tour-1",
        )

        payload = request.to_payload()

        assert payload["appointmentMode"] == "tour"
        assert payload["tourGroupId"] == "tour-1"
        assert payload["presentationCardId"] == "card-7"
        assert payload["notes"] == "Bring keys"
