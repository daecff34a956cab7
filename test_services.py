"""
Tests for the derived value calculator, entry validation and statistics
"""
import pytest

from conftest import make_log
from models import InvalidDuration, InvalidTimeFormat, Multipliers
from services import DerivedValueCalculator, FlightEntryValidator, StatisticsService


@pytest.fixture
def calculator():
    return DerivedValueCalculator()


def test_derived_values_twelve_hours(calculator):
    result = calculator.compute(720, 1.5, 2.0)

    assert result.decimal_hours == 12.0
    assert result.amount_x == 18.0
    assert result.amount_y == 36.0
    assert result.flying_hours_display == "12h 00m"


def test_derived_values_leading_fields(calculator):
    display, amount_x, amount_y = calculator.compute(90, 2.0, 3.64)[:3]

    assert display == "1h 30m"
    assert amount_x == 3.0
    assert amount_y == 10.92


def test_amount_y_chains_off_rounded_amount_x(calculator):
    """50 min * 1.3 = 1.0833 -> 1.08; 1.08 * 3.64 = 3.9312 -> 3.93 (not 3.94)"""
    result = calculator.compute(50, 1.3, 3.64)

    assert result.amount_x == 1.08
    assert result.amount_y == 3.93


def test_display_uses_raw_minutes(calculator):
    assert calculator.compute(125, 1.0, 1.0).flying_hours_display == "2h 05m"


def test_zero_duration(calculator):
    result = calculator.compute(0, 1.5, 3.64)

    assert result.flying_hours_display == "0h 00m"
    assert result.amount_x == 0.0
    assert result.amount_y == 0.0


def test_compute_for_log_uses_record_snapshot(calculator):
    log = make_log("a", "2025-01-01", "0800", "2025-01-01", "1000", 120, x=2.0, y=3.0)

    result = calculator.compute_for_log(log)

    assert result.amount_x == 4.0
    assert result.amount_y == 12.0


def test_compute_for_log_long_haul_adjustment(calculator):
    log = make_log("a", "2025-01-01", "0600", "2025-01-01", "1830", 750, x=1.0, y=1.0)

    assert calculator.compute_for_log(log).amount_x == 12.5
    assert calculator.compute_for_log(log, adjust_long_haul=True).amount_x == 24.0


class TestFlightEntryValidator:
    """Tests for the gate applied before logging a flight"""

    def test_valid_entry_returns_minutes(self):
        assert FlightEntryValidator().validate("2025-01-01", "0800", "2025-01-01", "2000") == 720

    def test_invalid_time_raises(self):
        with pytest.raises(InvalidTimeFormat):
            FlightEntryValidator().validate("2025-01-01", "2500", "2025-01-01", "2000")

    def test_arrival_before_departure_raises(self):
        with pytest.raises(InvalidDuration) as exc_info:
            FlightEntryValidator().validate("2025-01-02", "0800", "2025-01-01", "2020")
        assert exc_info.value.minutes == 0

    def test_invalid_date_raises_invalid_duration(self):
        with pytest.raises(InvalidDuration):
            FlightEntryValidator().validate("not-a-date", "0800", "2025-01-01", "2000")

    def test_preview(self):
        result = FlightEntryValidator().preview("2025-01-01", "2200", "2025-01-02", "0400",
                                                Multipliers(1.5, 2.0))

        assert result.flying_hours_display == "6h 00m"
        assert result.amount_x == 9.0
        assert result.amount_y == 18.0


class TestStatisticsService:
    """Tests for monthly and yearly aggregation"""

    def test_available_years(self, sample_logs):
        assert StatisticsService().available_years(sample_logs) == [2025, 2024]

    def test_monthly_summary(self, sample_logs):
        months = StatisticsService().monthly_summary(sample_logs, 2025)

        assert [m.month for m in months] == [1, 3]

        january, march = months
        assert january.month_name == "January"
        assert january.flight_count == 1
        assert january.total_minutes == 750
        assert january.total_display == "12h 30m"
        assert january.decimal_hours == "12.50"
        assert january.amount_x == 25.0
        assert january.amount_y == 25.0

        assert march.month_name == "March"
        assert march.flight_count == 2
        assert march.total_minutes == 300
        assert march.total_display == "5h 00m"
        assert march.decimal_hours == "5.00"
        # 3.0 + 4.5 and 6.0 + 16.38, each record on its own multipliers
        assert march.amount_x == 7.5
        assert march.amount_y == 22.38

    def test_monthly_summary_for_year_without_flights(self, sample_logs):
        assert StatisticsService().monthly_summary(sample_logs, 2030) == []

    def test_month_logs_sorted_latest_first(self, sample_logs):
        logs = StatisticsService().month_logs(sample_logs, 2025, 3)

        assert [log.id for log in logs] == ["a", "b"]

    def test_month_logs_groups_by_departure_date(self, sample_logs):
        """A leg departing 31 Dec and arriving 1 Jan belongs to December"""
        stats = StatisticsService()

        assert [log.id for log in stats.month_logs(sample_logs, 2024, 12)] == ["d"]
        assert [log.id for log in stats.month_logs(sample_logs, 2025, 1)] == ["c"]

    def test_year_totals(self, sample_logs):
        totals = StatisticsService().year_totals(sample_logs, 2025)

        assert totals.month == 0
        assert totals.month_name == "Total"
        assert totals.flight_count == 3
        assert totals.total_minutes == 1050
        assert totals.total_display == "17h 30m"
        assert totals.decimal_hours == "17.50"
        assert totals.amount_x == 32.5
        assert totals.amount_y == 47.38

    def test_long_haul_adjustment_applied_when_enabled(self, sample_logs):
        january = StatisticsService(long_haul_adjustment=True).monthly_summary(sample_logs, 2025)[0]

        assert january.total_minutes == 1440
        assert january.total_display == "24h 00m"
        assert january.amount_x == 48.0

    def test_empty_log(self):
        stats = StatisticsService()

        assert stats.available_years([]) == []
        assert stats.monthly_summary([], 2025) == []
        totals = stats.year_totals([], 2025)
        assert totals.flight_count == 0
        assert totals.total_minutes == 0
        assert totals.amount_x == 0.0

    def test_to_dataframe_keeps_log_order(self, sample_logs):
        df = StatisticsService().to_dataframe(sample_logs)

        assert list(df['id']) == ["a", "b", "c", "d"]
        assert list(df['amount_x']) == [3.0, 4.5, 25.0, 2.0]

    def test_unparseable_departure_date_is_ignored(self):
        logs = [make_log("x", "garbage", "0800", "garbage", "1000", 120)]

        assert StatisticsService().available_years(logs) == []
