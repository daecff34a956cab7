"""
Business logic services for the Flight Hours Log
"""
import logging
from typing import List, Optional, Sequence

import pandas as pd

from config import FlightLogConfig
from models import DerivedValues, FlightLog, InvalidDuration, MonthlySummary, Multipliers
from utils import (adjust_duration_minutes, compute_duration_minutes, format_minutes,
                   format_minutes_decimal, parse_time_of_day, round2)


class DerivedValueCalculator:
    """Converts flight minutes into decimal hours and the two chained amounts"""

    def compute(self, duration_minutes: int, multiplier_x: float, multiplier_y: float) -> DerivedValues:
        """
        Calculate the derived figures for a duration

        amount_y is computed from the already rounded amount_x, so the
        rounding of X carries into Y.

        Args:
            duration_minutes: Flight duration in whole minutes
            multiplier_x: Rate applied to decimal hours
            multiplier_y: Rate applied to amount_x

        Returns:
            DerivedValues(flying_hours_display, amount_x, amount_y, decimal_hours)
        """
        decimal_hours = duration_minutes / 60
        amount_x = round2(decimal_hours * multiplier_x)
        amount_y = round2(amount_x * multiplier_y)

        return DerivedValues(
            flying_hours_display=format_minutes(duration_minutes),
            amount_x=amount_x,
            amount_y=amount_y,
            decimal_hours=decimal_hours,
        )

    def compute_for_log(self, log: FlightLog, adjust_long_haul: bool = False) -> DerivedValues:
        """Derived figures for a record, always on its own snapshot multipliers"""
        minutes = adjust_duration_minutes(log.duration_minutes) if adjust_long_haul else log.duration_minutes
        return self.compute(minutes, log.multiplier_x, log.multiplier_y)


class FlightEntryValidator:
    """Gate applied before a new flight is handed to the store"""

    def __init__(self, calculator: Optional[DerivedValueCalculator] = None):
        self.calculator = calculator or DerivedValueCalculator()
        self.logger = logging.getLogger(__name__)

    def validate(self, departure_date: str, dep_time: str, arrival_date: str, arr_time: str) -> int:
        """
        Check a flight entry and return its duration

        Raises:
            InvalidTimeFormat: If either time is not a valid HHmm value
            InvalidDuration: If the arrival is not after the departure
        """
        parse_time_of_day(dep_time)
        parse_time_of_day(arr_time)

        minutes = compute_duration_minutes(departure_date, dep_time, arrival_date, arr_time)
        if minutes <= 0:
            self.logger.debug(f"Rejected flight {departure_date} {dep_time} -> {arrival_date} {arr_time}")
            raise InvalidDuration(minutes)
        return minutes

    def preview(self, departure_date: str, dep_time: str, arrival_date: str, arr_time: str,
                multipliers: Multipliers) -> DerivedValues:
        """Figures shown for an entry before it is saved"""
        minutes = self.validate(departure_date, dep_time, arrival_date, arr_time)
        return self.calculator.compute(minutes, multipliers.x, multipliers.y)


class StatisticsService:
    """Monthly and yearly totals, recomputed from the full log on every call"""

    COLUMNS = [
        'id', 'departure_date', 'arrival_date', 'dep_time', 'arr_time',
        'duration_minutes', 'flying_hours', 'decimal_hours',
        'multiplier_x', 'multiplier_y', 'amount_x', 'amount_y'
    ]

    def __init__(self, calculator: Optional[DerivedValueCalculator] = None,
                 long_haul_adjustment: bool = False):
        self.calculator = calculator or DerivedValueCalculator()
        self.long_haul_adjustment = long_haul_adjustment
        self.logger = logging.getLogger(__name__)

    @classmethod
    def from_config(cls, config_manager) -> "StatisticsService":
        return cls(long_haul_adjustment=bool(
            config_manager.get("calculation", "long_haul_adjustment", False)
        ))

    def to_dataframe(self, logs: Sequence[FlightLog]) -> pd.DataFrame:
        """One row per record with its derived values, in log order"""
        rows = []
        for log in logs:
            minutes = log.duration_minutes
            if self.long_haul_adjustment:
                minutes = adjust_duration_minutes(minutes)
            derived = self.calculator.compute(minutes, log.multiplier_x, log.multiplier_y)
            rows.append({
                'id': log.id,
                'departure_date': log.departure_date,
                'arrival_date': log.arrival_date,
                'dep_time': log.dep_time,
                'arr_time': log.arr_time,
                'duration_minutes': minutes,
                'flying_hours': derived.flying_hours_display,
                'decimal_hours': derived.decimal_hours,
                'multiplier_x': log.multiplier_x,
                'multiplier_y': log.multiplier_y,
                'amount_x': derived.amount_x,
                'amount_y': derived.amount_y,
            })

        df = pd.DataFrame(rows, columns=self.COLUMNS)
        departure = pd.to_datetime(df['departure_date'], format=FlightLogConfig.DATE_FORMAT, errors='coerce')
        df['year'] = departure.dt.year
        df['month'] = departure.dt.month
        return df

    def available_years(self, logs: Sequence[FlightLog]) -> List[int]:
        """Years that have at least one flight, newest first"""
        years = self.to_dataframe(logs)['year'].dropna().astype(int).unique()
        return sorted((int(y) for y in years), reverse=True)

    def monthly_summary(self, logs: Sequence[FlightLog], year: int) -> List[MonthlySummary]:
        """Totals for every month of the year that has flights, January first"""
        df = self.to_dataframe(logs)
        df = df[df['year'] == year]
        if df.empty:
            return []

        grouped = df.groupby('month').agg(
            flight_count=('id', 'count'),
            total_minutes=('duration_minutes', 'sum'),
            amount_x=('amount_x', 'sum'),
            amount_y=('amount_y', 'sum'),
        )

        return [
            self._summary(year, int(month), row)
            for month, row in grouped.iterrows()
        ]

    def year_totals(self, logs: Sequence[FlightLog], year: int) -> MonthlySummary:
        """Totals for the whole year (month=0)"""
        df = self.to_dataframe(logs)
        df = df[df['year'] == year]
        row = {
            'flight_count': len(df),
            'total_minutes': df['duration_minutes'].sum(),
            'amount_x': df['amount_x'].sum(),
            'amount_y': df['amount_y'].sum(),
        }
        return self._summary(year, 0, row)

    def month_logs(self, logs: Sequence[FlightLog], year: int, month: int) -> List[FlightLog]:
        """Flights departing in the given month, latest departure date first"""
        logs = list(logs)
        df = self.to_dataframe(logs)
        df = df[(df['year'] == year) & (df['month'] == month)]
        selected = [logs[i] for i in df.index]
        return sorted(selected, key=lambda log: log.departure_date, reverse=True)

    def _summary(self, year: int, month: int, row) -> MonthlySummary:
        total_minutes = int(row['total_minutes'])
        return MonthlySummary(
            year=year,
            month=month,
            month_name=FlightLogConfig.MONTH_NAMES[month - 1] if month else "Total",
            flight_count=int(row['flight_count']),
            total_minutes=total_minutes,
            total_display=format_minutes(total_minutes),
            decimal_hours=format_minutes_decimal(total_minutes),
            amount_x=round2(float(row['amount_x'])),
            amount_y=round2(float(row['amount_y'])),
        )
