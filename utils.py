"""
Utility functions for the Flight Hours Log
"""
import os
import re
import sys
import math
import logging
from logging.handlers import RotatingFileHandler
from datetime import date, datetime, time
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, Tuple, Union

from config import FlightLogConfig
from models import InvalidTimeFormat

logger = logging.getLogger(__name__)

DateLike = Union[str, date]


def resource_path(relative_path: str) -> str:
    """Get absolute path to resource, works for dev and for PyInstaller"""
    base_path = getattr(sys, '_MEIPASS', os.path.abspath("."))
    return os.path.join(base_path, relative_path)


def parse_time_of_day(raw: str) -> Tuple[int, int]:
    """
    Parse an HHmm time-of-day

    Non-digit characters are stripped first, so "08:30" is accepted.

    Args:
        raw: Time string, e.g. "0630"

    Returns:
        (hour, minute) tuple

    Raises:
        InvalidTimeFormat: If the digits are not exactly HHmm or out of range
    """
    if not isinstance(raw, str):
        raise InvalidTimeFormat(raw)

    clean = re.sub(r'\D', '', raw)
    if len(clean) != FlightLogConfig.TIME_DIGITS:
        raise InvalidTimeFormat(raw)

    hour = int(clean[:2])
    minute = int(clean[2:])
    if hour > 23 or minute > 59:
        raise InvalidTimeFormat(raw)

    return hour, minute


def parse_date(value: DateLike) -> date:
    """Parse an ISO YYYY-MM-DD date (date objects pass through)"""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return datetime.strptime(value.strip(), FlightLogConfig.DATE_FORMAT).date()


def combine_date_time(day: DateLike, time_str: str) -> datetime:
    """Combine a calendar date and an HHmm time into a naive wall-clock datetime"""
    hour, minute = parse_time_of_day(time_str)
    return datetime.combine(parse_date(day), time(hour, minute))


def compute_duration_minutes(dep_date: DateLike, dep_time: str,
                             arr_date: DateLike, arr_time: str) -> int:
    """
    Calculate flight duration in whole minutes

    Overnight flights need the real arrival date; no wraparound is applied
    when the arrival clock time is earlier than the departure clock time.

    Returns:
        Minutes between departure and arrival, or 0 when the arrival is not
        after the departure or any input cannot be parsed
    """
    try:
        departure = combine_date_time(dep_date, dep_time)
        arrival = combine_date_time(arr_date, arr_time)
    except (InvalidTimeFormat, ValueError, TypeError, AttributeError) as e:
        logger.debug(f"Cannot compute duration for {dep_date} {dep_time} -> {arr_date} {arr_time}: {e}")
        return 0

    minutes = int((arrival - departure).total_seconds() // 60)
    return max(minutes, 0)


def adjust_duration_minutes(minutes: int) -> int:
    """Report durations between 10h and 24h inclusive as a flat 24h"""
    if FlightLogConfig.LONG_HAUL_MIN_MINUTES <= minutes <= FlightLogConfig.LONG_HAUL_MAX_MINUTES:
        return FlightLogConfig.LONG_HAUL_REPORTED_MINUTES
    return minutes


def format_minutes(total_minutes: int) -> str:
    """Format minutes as '{h}h {mm}m'"""
    hours, minutes = divmod(int(total_minutes), 60)
    return f"{hours}h {minutes:02d}m"


def format_minutes_decimal(total_minutes: int) -> str:
    """Format minutes as decimal hours with two places"""
    return f"{total_minutes / 60:.2f}"


def round2(value: float) -> float:
    """Round half-up to 2 decimal places on the decimal representation"""
    quantized = Decimal(repr(float(value))).quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)
    return float(quantized)


def setup_logging(debug: bool = False, log_file: Optional[str] = None,
                  max_bytes: int = 10485760, backup_count: int = 3,
                  level: Optional[str] = None) -> logging.Logger:
    """Setup logging configuration; debug wins over an explicit level name"""
    if debug:
        level = logging.DEBUG
    else:
        level = getattr(logging, (level or "INFO").upper(), logging.INFO)

    handlers = [logging.StreamHandler()]
    if log_file:
        handlers.append(RotatingFileHandler(log_file, maxBytes=max_bytes,
                                            backupCount=backup_count, encoding='utf-8'))

    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=handlers
    )

    return logging.getLogger(__name__)


def validate_numeric_input(value: Union[str, float, int], field_name: str) -> float:
    """
    Validate and convert numeric input

    Args:
        value: Value to validate (strings may use a comma decimal separator)
        field_name: Name of the field for error messages

    Returns:
        Converted float value

    Raises:
        ValueError: If value is not a valid finite number
    """
    try:
        cleaned_value = value.replace(',', '.') if isinstance(value, str) else value
        result = float(cleaned_value)
    except (ValueError, TypeError):
        raise ValueError(f"Invalid numeric value for {field_name}: {value}")

    if not math.isfinite(result):
        raise ValueError(f"Invalid numeric value for {field_name}: {value}")

    return result
