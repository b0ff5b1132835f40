"""Tests for resource_ledger module."""

from datetime import date

import pytest

from resource_ledger import ResourceLedger, WorkerDay, classify_hours


def test_add_accumulates_hours():
    ledger = ResourceLedger()
    ledger.add("W", date(2024, 1, 1), WorkerDay.UNDERLOADED, 3.0)
    ledger.add("W", date(2024, 1, 1), WorkerDay.FINE, 4.5)

    entry = ledger.get("W", date(2024, 1, 1))
    assert entry.hours == 7.5
    assert entry.kind is WorkerDay.FINE
    assert len(ledger) == 1


def test_absence_tag_is_kept_on_add():
    ledger = ResourceLedger()
    ledger.add("W", date(2024, 1, 6), WorkerDay.PUB_HOLIDAYS)
    ledger.add("W", date(2024, 1, 6), WorkerDay.PUB_HOLIDAYS)

    assert ledger.get("W", date(2024, 1, 6)).as_tuple() == (0.0, WorkerDay.PUB_HOLIDAYS)


@pytest.mark.parametrize(
    "hours,expected",
    [
        (0.0, WorkerDay.UNASSIGNED),
        (0.0005, WorkerDay.UNASSIGNED),
        (0.5, WorkerDay.UNDERLOADED),
        (7.998, WorkerDay.UNDERLOADED),
        (7.9995, WorkerDay.FINE),
        (8.0, WorkerDay.FINE),
        (8.0009, WorkerDay.FINE),
        (8.002, WorkerDay.OVERLOADED),
        (16.0, WorkerDay.OVERLOADED),
    ],
)
def test_classify_hours(hours, expected):
    assert classify_hours(hours) is expected


class TestFinalize:
    def test_fills_gaps_for_active_workers(self):
        ledger = ResourceLedger()
        ledger.add("W", date(2024, 1, 2), WorkerDay.FINE, 8.0)
        ledger.finalize(date(2024, 1, 1), date(2024, 1, 4))

        assert ledger.days("W") == [
            date(2024, 1, 1),
            date(2024, 1, 2),
            date(2024, 1, 3),
            date(2024, 1, 4),
        ]
        assert ledger.get("W", date(2024, 1, 1)).as_tuple() == (0.0, WorkerDay.UNASSIGNED)
        assert ledger.workers() == ["W"]

    def test_reclassifies_by_total_hours(self):
        ledger = ResourceLedger()
        ledger.add("W", date(2024, 1, 1), WorkerDay.FINE, 8.0)
        ledger.add("W", date(2024, 1, 1), WorkerDay.UNDERLOADED, 2.0)
        ledger.add("W", date(2024, 1, 2), WorkerDay.UNDERLOADED, 4.0)
        ledger.add("W", date(2024, 1, 2), WorkerDay.UNDERLOADED, 4.0)
        ledger.finalize(date(2024, 1, 1), date(2024, 1, 2))

        assert ledger.get("W", date(2024, 1, 1)).kind is WorkerDay.OVERLOADED
        assert ledger.get("W", date(2024, 1, 2)).kind is WorkerDay.FINE

    def test_absences_untouched(self):
        ledger = ResourceLedger()
        ledger.add("W", date(2024, 1, 1), WorkerDay.HOLIDAYS)
        ledger.add("W", date(2024, 1, 2), WorkerDay.OTHER_DUTIES)
        ledger.finalize(date(2024, 1, 1), date(2024, 1, 2))

        assert ledger.get("W", date(2024, 1, 1)).kind is WorkerDay.HOLIDAYS
        assert ledger.get("W", date(2024, 1, 2)).kind is WorkerDay.OTHER_DUTIES

    def test_overload_is_logged(self, caplog):
        ledger = ResourceLedger()
        ledger.add("W", date(2024, 1, 1), WorkerDay.FINE, 12.0)
        ledger.finalize(date(2024, 1, 1), date(2024, 1, 1))
        assert "Overloaded: W on 2024-01-01" in caplog.text

    def test_is_one_shot(self):
        ledger = ResourceLedger()
        ledger.finalize(date(2024, 1, 1), date(2024, 1, 1))

        with pytest.raises(RuntimeError, match="already finalized"):
            ledger.finalize(date(2024, 1, 1), date(2024, 1, 1))
        with pytest.raises(RuntimeError, match="finalized"):
            ledger.add("W", date(2024, 1, 1), WorkerDay.FINE, 8.0)


def test_as_dict_sorted():
    ledger = ResourceLedger()
    ledger.add("Zed", date(2024, 1, 2), WorkerDay.FINE, 8.0)
    ledger.add("Amy", date(2024, 1, 2), WorkerDay.FINE, 8.0)
    ledger.add("Amy", date(2024, 1, 1), WorkerDay.UNDERLOADED, 2.0)
    ledger.finalize(date(2024, 1, 1), date(2024, 1, 2))

    data = ledger.as_dict()
    assert list(data) == ["Amy", "Zed"]
    assert list(data["Amy"]) == [date(2024, 1, 1), date(2024, 1, 2)]
    assert data["Zed"][date(2024, 1, 1)] == (0.0, WorkerDay.UNASSIGNED)
    assert ledger.hours("Amy", date(2024, 1, 1)) == 2.0
    assert ledger.hours("Nobody", date(2024, 1, 1)) == 0.0
