"""Tests for deriving cycle lengths from recorded periods."""

from __future__ import annotations

import logging
from datetime import date

import pytest

from src.cycles.cycle_derivation import derive_cycle_report, derive_cycles
from src.cycles.models import CycleObservation, PeriodInterval


def period(start: str, end: str) -> PeriodInterval:
    return PeriodInterval(from_date=date.fromisoformat(start), to_date=date.fromisoformat(end))


class TestDeriveCycles:
    def test_two_periods_give_one_cycle(self) -> None:
        cycles = derive_cycles(
            [period("2024-05-01", "2024-05-05"), period("2024-06-02", "2024-06-06")]
        )
        assert cycles == [CycleObservation(start_date=date(2024, 5, 1), cycle_length=32)]

    def test_single_period_gives_no_cycles(self) -> None:
        assert derive_cycles([period("2024-01-01", "2024-01-05")]) == []

    def test_empty_log_gives_no_cycles(self) -> None:
        assert derive_cycles([]) == []

    def test_n_periods_give_n_minus_one_cycles(self, regular_periods: list[PeriodInterval]) -> None:
        cycles = derive_cycles(regular_periods)
        assert len(cycles) == len(regular_periods) - 1
        assert [c.cycle_length for c in cycles] == [28, 29, 28, 28]

    def test_leap_day_counted(self) -> None:
        cycles = derive_cycles(
            [period("2024-02-01", "2024-02-03"), period("2024-03-01", "2024-03-03")]
        )
        assert cycles[0].cycle_length == 29

    def test_cycle_start_is_earlier_period_start(self, regular_periods: list[PeriodInterval]) -> None:
        cycles = derive_cycles(regular_periods)
        assert [c.start_date for c in cycles] == [p.from_date for p in regular_periods[:-1]]

    def test_input_not_mutated(self, regular_periods: list[PeriodInterval]) -> None:
        snapshot = list(regular_periods)
        derive_cycles(regular_periods)
        assert regular_periods == snapshot

    def test_restartable(self, regular_periods: list[PeriodInterval]) -> None:
        assert derive_cycles(regular_periods) == derive_cycles(regular_periods)


class TestDroppedPairs:
    def test_duplicate_start_dropped(self) -> None:
        intervals = [
            period("2024-01-01", "2024-01-03"),
            period("2024-01-01", "2024-01-05"),
            period("2024-01-29", "2024-02-02"),
        ]
        report = derive_cycle_report(intervals)
        assert report.dropped_count == 1
        assert [c.cycle_length for c in report.observations] == [28]

    def test_out_of_order_start_dropped(self) -> None:
        intervals = [
            period("2024-03-01", "2024-03-04"),
            period("2024-02-01", "2024-02-04"),
            period("2024-03-30", "2024-04-02"),
        ]
        report = derive_cycle_report(intervals)
        assert report.dropped_pairs == ((date(2024, 3, 1), date(2024, 2, 1)),)
        assert len(report.observations) == 1
        assert report.observations[0].cycle_length == 58

    def test_every_observation_positive(self) -> None:
        intervals = [
            period("2024-01-10", "2024-01-12"),
            period("2024-01-10", "2024-01-11"),
            period("2024-01-05", "2024-01-06"),
            period("2024-02-05", "2024-02-06"),
        ]
        report = derive_cycle_report(intervals)
        assert all(c.cycle_length > 0 for c in report.observations)
        assert len(report.observations) + report.dropped_count == len(intervals) - 1

    def test_dropped_pairs_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        intervals = [period("2024-01-01", "2024-01-03"), period("2024-01-01", "2024-01-02")]
        with caplog.at_level(logging.WARNING, logger="mitra.cycles.cycle_derivation"):
            derive_cycles(intervals)
        assert "Dropped 1 cycle pair" in caplog.text

    def test_clean_log_reports_no_drops(self, regular_periods: list[PeriodInterval]) -> None:
        report = derive_cycle_report(regular_periods)
        assert report.dropped_count == 0
        assert report.to_dict()["droppedCount"] == 0
