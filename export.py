"""
Export functionality for flight-hours reports
Supports Excel, CSV, and formatted text exports
"""
import csv
import logging
from datetime import datetime
from typing import List, Optional, Sequence

import openpyxl
import pandas as pd
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter
from openpyxl.utils.dataframe import dataframe_to_rows

from models import FlightLog, MonthlySummary
from services import StatisticsService

FLIGHT_HEADERS = ['Departure Date', 'Dep', 'Arrival Date', 'Arr', 'Duration',
                  'Decimal Hours', 'Multiplier X', 'Multiplier Y', 'Amount X', 'Amount Y']


class ReportExporter:
    """Class for exporting a year (or one month) of logged flights"""

    def __init__(self, statistics: Optional[StatisticsService] = None,
                 include_timestamps: bool = True, app_title: str = "Flight Hours Log",
                 app_version: Optional[str] = None):
        self.statistics = statistics or StatisticsService()
        self.include_timestamps = include_timestamps
        self.app_title = app_title
        self.app_version = app_version
        self.logger = logging.getLogger(__name__)

    @classmethod
    def from_config(cls, config_manager) -> "ReportExporter":
        """Build an exporter from the `export` and `app` config sections"""
        return cls(
            statistics=StatisticsService.from_config(config_manager),
            include_timestamps=config_manager.get("export", "include_timestamps", True),
            app_title=config_manager.get("app", "title", "Flight Hours Log"),
            app_version=config_manager.get("app", "version"),
        )

    def _report_data(self, logs: Sequence[FlightLog], year: int, month: Optional[int]):
        """Totals, month rows and flight dataframe for the reported period"""
        if month:
            flights = self.statistics.month_logs(logs, year, month)
            months = [m for m in self.statistics.monthly_summary(logs, year) if m.month == month]
        else:
            flights = sorted(
                (log for log in logs if str(log.departure_date).startswith(f"{year:04d}-")),
                key=lambda log: log.departure_date, reverse=True
            )
            months = self.statistics.monthly_summary(logs, year)

        totals = self.statistics.year_totals(flights, year)
        flights_df = self.statistics.to_dataframe(flights)
        return totals, months, flights_df

    def _flight_rows(self, flights_df: pd.DataFrame) -> List[list]:
        return [
            [
                row['departure_date'], row['dep_time'], row['arrival_date'], row['arr_time'],
                row['flying_hours'], f"{row['decimal_hours']:.2f}",
                row['multiplier_x'], row['multiplier_y'],
                f"{row['amount_x']:.2f}", f"{row['amount_y']:.2f}"
            ]
            for _, row in flights_df.iterrows()
        ]

    @staticmethod
    def _period_label(year: int, month: Optional[int], months: List[MonthlySummary]) -> str:
        if month and months:
            return f"{months[0].month_name} {year}"
        if month:
            return f"{year}-{month:02d}"
        return str(year)

    def export_to_csv(self, filepath: str, logs: Sequence[FlightLog], year: int,
                      month: Optional[int] = None) -> bool:
        """
        Export report to CSV format

        Args:
            filepath: Output file path
            logs: Logged flights (any order)
            year: Reported year
            month: Optional month (1-12) to restrict the report to

        Returns:
            True if successful, False otherwise
        """
        try:
            totals, months, flights_df = self._report_data(logs, year, month)
            export_data = []

            export_data.append(['=== FLIGHT HOURS SUMMARY ==='])
            export_data.append(['Period', self._period_label(year, month, months)])
            export_data.append(['Flights', totals.flight_count])
            export_data.append(['Total Time', totals.total_display])
            export_data.append(['Decimal Hours', totals.decimal_hours])
            export_data.append(['Amount X', f"{totals.amount_x:.2f}"])
            export_data.append(['Amount Y', f"{totals.amount_y:.2f}"])
            export_data.append([''])

            export_data.append(['=== MONTHLY SUMMARY ==='])
            export_data.append(['Month', 'Flights', 'Total Time', 'Decimal Hours', 'Amount X', 'Amount Y'])
            for summary in months:
                export_data.append([
                    summary.month_name,
                    summary.flight_count,
                    summary.total_display,
                    summary.decimal_hours,
                    f"{summary.amount_x:.2f}",
                    f"{summary.amount_y:.2f}"
                ])
            export_data.append([''])

            export_data.append(['=== FLIGHTS ==='])
            export_data.append(FLIGHT_HEADERS)
            export_data.extend(self._flight_rows(flights_df))

            with open(filepath, 'w', newline='', encoding='utf-8') as csvfile:
                writer = csv.writer(csvfile)
                writer.writerows(export_data)

            self.logger.info(f"CSV report for {year} written to {filepath}")
            return True

        except (OSError, ValueError) as e:
            self.logger.error(f"CSV export failed: {e}")
            return False

    def export_to_excel(self, filepath: str, logs: Sequence[FlightLog], year: int,
                        month: Optional[int] = None) -> bool:
        """
        Export report to Excel format with formatting

        Returns:
            True if successful, False otherwise
        """
        try:
            totals, months, flights_df = self._report_data(logs, year, month)
            workbook = openpyxl.Workbook()

            self._create_summary_sheet(workbook, totals, self._period_label(year, month, months))
            self._create_monthly_sheet(workbook, months)
            self._create_flights_sheet(workbook, flights_df)

            workbook.save(filepath)
            self.logger.info(f"Excel report for {year} written to {filepath}")
            return True

        except (OSError, ValueError) as e:
            self.logger.error(f"Excel export failed: {e}")
            return False

    def _create_summary_sheet(self, workbook: openpyxl.Workbook, totals: MonthlySummary, period: str):
        """Create summary sheet in Excel workbook"""
        ws = workbook.active
        ws.title = "Summary"

        ws['A1'] = "FLIGHT HOURS SUMMARY"
        ws['A1'].font = Font(bold=True, size=14)
        ws.merge_cells('A1:C1')

        items = [
            ("Period", period),
            ("Flights", totals.flight_count),
            ("Total Time", totals.total_display),
            ("Decimal Hours", totals.decimal_hours),
            ("Amount X", totals.amount_x),
            ("Amount Y", totals.amount_y),
        ]
        if self.include_timestamps:
            items.append(("Generated", datetime.now().strftime('%Y-%m-%d %H:%M:%S')))

        for row, (label, value) in enumerate(items, 3):
            ws[f'A{row}'] = label
            ws[f'A{row}'].font = Font(bold=True)
            ws[f'B{row}'] = value

        self._autosize(ws, 50)

    def _create_monthly_sheet(self, workbook: openpyxl.Workbook, months: List[MonthlySummary]):
        """Create per-month totals sheet"""
        ws = workbook.create_sheet("Monthly")

        headers = ['Month', 'Flights', 'Total Time', 'Decimal Hours', 'Amount X', 'Amount Y']
        for col, header in enumerate(headers, 1):
            ws.cell(row=1, column=col, value=header).font = Font(bold=True)

        for row_idx, summary in enumerate(months, 2):
            ws.cell(row=row_idx, column=1, value=summary.month_name)
            ws.cell(row=row_idx, column=2, value=summary.flight_count)
            ws.cell(row=row_idx, column=3, value=summary.total_display)
            ws.cell(row=row_idx, column=4, value=summary.decimal_hours)
            ws.cell(row=row_idx, column=5, value=summary.amount_x)
            ws.cell(row=row_idx, column=6, value=summary.amount_y)

        self._autosize(ws, 30)

    def _create_flights_sheet(self, workbook: openpyxl.Workbook, flights_df: pd.DataFrame):
        """Create per-flight sheet"""
        ws = workbook.create_sheet("Flights")

        columns = ['departure_date', 'dep_time', 'arrival_date', 'arr_time', 'flying_hours',
                   'decimal_hours', 'multiplier_x', 'multiplier_y', 'amount_x', 'amount_y']
        sheet_df = flights_df[columns].copy()
        sheet_df.columns = FLIGHT_HEADERS
        sheet_df['Decimal Hours'] = sheet_df['Decimal Hours'].astype(float).round(2)

        for r in dataframe_to_rows(sheet_df, index=False, header=True):
            ws.append(r)

        for cell in ws[1]:
            cell.font = Font(bold=True)

        self._autosize(ws, 25)

    @staticmethod
    def _autosize(ws, limit: int):
        """Auto-adjust column widths"""
        for column in ws.columns:
            max_length = 0
            for cell in column:
                if cell.value is not None:
                    max_length = max(max_length, len(str(cell.value)))
            ws.column_dimensions[get_column_letter(column[0].column)].width = min(max_length + 2, limit)

    def export_to_text(self, filepath: str, logs: Sequence[FlightLog], year: int,
                       month: Optional[int] = None) -> bool:
        """
        Export report to formatted text file

        Returns:
            True if successful, False otherwise
        """
        try:
            totals, months, flights_df = self._report_data(logs, year, month)

            with open(filepath, 'w', encoding='utf-8') as f:
                f.write("=" * 60 + "\n")
                f.write("FLIGHT HOURS REPORT\n")
                f.write("=" * 60 + "\n\n")

                if self.include_timestamps:
                    f.write(f"Generated on: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}\n")
                f.write(f"Period: {self._period_label(year, month, months)}\n\n")

                f.write("SUMMARY\n")
                f.write("-" * 60 + "\n")
                f.write(f"{'Flights:':<35} {totals.flight_count:>15}\n")
                f.write(f"{'Total Time:':<35} {totals.total_display:>15}\n")
                f.write(f"{'Decimal Hours:':<35} {totals.decimal_hours:>15}\n")
                f.write(f"{'Amount X:':<35} {totals.amount_x:>15,.2f}\n")
                f.write(f"{'Amount Y:':<35} {totals.amount_y:>15,.2f}\n\n")

                f.write("MONTHLY TOTALS\n")
                f.write("-" * 80 + "\n")
                f.write(f"{'Month':<12} {'Flights':<8} {'Time':<10} {'Hours':<8} {'Amount X':<12} {'Amount Y':<12}\n")
                f.write("-" * 80 + "\n")
                for summary in months:
                    f.write(f"{summary.month_name:<12} {summary.flight_count:<8} {summary.total_display:<10} "
                            f"{summary.decimal_hours:<8} {summary.amount_x:<12.2f} {summary.amount_y:<12.2f}\n")
                f.write("\n")

                f.write("FLIGHTS\n")
                f.write("-" * 80 + "\n")
                for _, row in flights_df.iterrows():
                    f.write(f"{row['departure_date']} {row['dep_time']} -> {row['arrival_date']} {row['arr_time']}  "
                            f"{row['flying_hours']:>8}  X {row['amount_x']:>10.2f}  Y {row['amount_y']:>10.2f}\n")

                f.write("-" * 80 + "\n")
                signature = f"{self.app_title} {self.app_version}" if self.app_version else self.app_title
                f.write(f"Report generated by {signature}\n")

            self.logger.info(f"Text report for {year} written to {filepath}")
            return True

        except (OSError, ValueError) as e:
            self.logger.error(f"Text export failed: {e}")
            return False
