"""
Shared pytest fixtures for the Flight Hours Log tests
"""
import itertools
from datetime import date

import pytest

from models import FlightLog
from storage import MemoryStorage
from store import FlightLogStore

FIXED_TODAY = date(2025, 6, 15)


def make_log(log_id, departure_date, dep_time, arrival_date, arr_time, minutes,
             x=1.5, y=3.64):
    """Build a record directly, bypassing the store"""
    return FlightLog(
        id=log_id,
        departure_date=departure_date,
        arrival_date=arrival_date,
        dep_time=dep_time,
        arr_time=arr_time,
        duration_minutes=minutes,
        multiplier_x=x,
        multiplier_y=y,
    )


@pytest.fixture
def memory_storage():
    return MemoryStorage()


@pytest.fixture
def id_factory():
    counter = itertools.count(1)
    return lambda: f"log-{next(counter)}"


@pytest.fixture
def store(memory_storage, id_factory):
    return FlightLogStore(memory_storage, id_factory=id_factory, today=lambda: FIXED_TODAY)


@pytest.fixture
def sample_logs():
    """Four legs across two years, newest first"""
    return [
        make_log("a", "2025-03-10", "0800", "2025-03-10", "1000", 120, x=1.5, y=2.0),
        make_log("b", "2025-03-02", "2200", "2025-03-03", "0100", 180, x=1.5, y=3.64),
        make_log("c", "2025-01-20", "0600", "2025-01-20", "1830", 750, x=2.0, y=1.0),
        make_log("d", "2024-12-31", "2300", "2025-01-01", "0100", 120, x=1.0, y=1.0),
    ]
