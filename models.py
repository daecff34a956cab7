"""
Data models for the Flight Hours Log
"""
from dataclasses import dataclass, field
from typing import Any, Dict, NamedTuple, Optional, Tuple

from config import FlightLogConfig


# Persisted (camelCase) key for each FlightLog field
RECORD_KEYS = {
    "id": "id",
    "departure_date": "departureDate",
    "arrival_date": "arrivalDate",
    "dep_time": "depTime",
    "arr_time": "arrTime",
    "duration_minutes": "durationMinutes",
    "multiplier_x": "multiplierX",
    "multiplier_y": "multiplierY",
}


@dataclass(frozen=True)
class Multipliers:
    """Multiplier pair applied to decimal flight hours"""
    x: float = FlightLogConfig.DEFAULT_MULTIPLIER_X
    y: float = FlightLogConfig.DEFAULT_MULTIPLIER_Y

    def to_dict(self) -> Dict[str, float]:
        return {"x": self.x, "y": self.y}

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "Multipliers":
        """Build from persisted form, falling back to defaults per missing key"""
        if not isinstance(data, dict):
            return cls()
        return cls(
            x=float(data.get("x", FlightLogConfig.DEFAULT_MULTIPLIER_X)),
            y=float(data.get("y", FlightLogConfig.DEFAULT_MULTIPLIER_Y)),
        )


@dataclass(frozen=True)
class FlightLog:
    """Represents a single logged flight leg

    duration_minutes and the multiplier pair are frozen at creation time.
    """
    id: str
    departure_date: str
    arrival_date: str
    dep_time: str
    arr_time: str
    duration_minutes: int
    multiplier_x: float
    multiplier_y: float
    extra: Dict[str, Any] = field(default_factory=dict, compare=False)

    def to_dict(self) -> Dict[str, Any]:
        """Persisted form; unknown keys carried in `extra` are written back"""
        data = dict(self.extra)
        for attr, key in RECORD_KEYS.items():
            data[key] = getattr(self, attr)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FlightLog":
        """Hydrate a record from its persisted (already migrated) form"""
        extra = {k: v for k, v in data.items() if k not in RECORD_KEYS.values()}
        return cls(
            id=str(data["id"]),
            departure_date=data.get("departureDate", ""),
            arrival_date=data.get("arrivalDate", ""),
            dep_time=data.get("depTime", ""),
            arr_time=data.get("arrTime", ""),
            duration_minutes=int(data.get("durationMinutes", 0)),
            multiplier_x=float(data.get("multiplierX", FlightLogConfig.DEFAULT_MULTIPLIER_X)),
            multiplier_y=float(data.get("multiplierY", FlightLogConfig.DEFAULT_MULTIPLIER_Y)),
            extra=extra,
        )


@dataclass(frozen=True)
class StoreState:
    """Immutable snapshot of the store"""
    logs: Tuple[FlightLog, ...] = ()
    multipliers: Multipliers = field(default_factory=Multipliers)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "logs": [log.to_dict() for log in self.logs],
            "multipliers": self.multipliers.to_dict(),
        }


class DerivedValues(NamedTuple):
    """Derived figures for one duration"""
    flying_hours_display: str
    amount_x: float
    amount_y: float
    decimal_hours: float


@dataclass
class MonthlySummary:
    """Aggregated totals for one month (month=0 for a whole year)"""
    year: int
    month: int
    month_name: str
    flight_count: int
    total_minutes: int
    total_display: str
    decimal_hours: str
    amount_x: float
    amount_y: float


class FlightLogError(Exception):
    """Base class for flight log errors"""


class InvalidTimeFormat(FlightLogError):
    """Exception raised when a time-of-day is not a valid HHmm value"""
    def __init__(self, raw: Any):
        self.raw = raw
        super().__init__(f"Invalid HHmm time: {raw!r}")


class InvalidDuration(FlightLogError):
    """Exception raised when a computed duration is not positive"""
    def __init__(self, minutes: int):
        self.minutes = minutes
        super().__init__(f"Flight duration must be positive, got {minutes} minutes")


class StorageUnavailable(FlightLogError):
    """Exception raised when durable storage cannot be read or written"""
    def __init__(self, key: str, reason: str):
        self.key = key
        self.reason = reason
        super().__init__(f"Storage unavailable for '{key}': {reason}")
