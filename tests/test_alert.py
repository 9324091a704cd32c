#!/usr/bin/env python3
"""Tests for Alert dataclass."""
from fleet import Alert, Status


def make(status):
    return Alert(
        maintenance_id="m1",
        vehicle_plate="ABC1D23",
        maintenance_title="Oil change",
        status=status,
    )


class TestAlert:
    """Tests for Alert defaults and sorting."""

    def test_defaults(self):
        alert = make(Status.DUE_SOON)
        assert alert.next_date is None
        assert alert.next_mileage is None
        assert alert.current_mileage == 0
        assert alert.days_remaining is None
        assert alert.km_remaining is None

    def test_sort_by_urgency(self):
        alerts = [make(Status.DUE_SOON), make(Status.OVERDUE)]
        alerts.sort(key=lambda a: a.status.value)
        assert [a.status for a in alerts] == [Status.OVERDUE, Status.DUE_SOON]
