"""
Configuration module for the Flight Hours Log
Contains schema constants, default multipliers and duration rules
"""

class FlightLogConfig:
    """Configuration class containing all flight-log constants"""

    # Persistence
    STORAGE_KEY = "flight-storage"
    CURRENT_SCHEMA_VERSION = 3

    # Default multiplier pair: X = pay rate per decimal hour, Y = USD -> QAR
    DEFAULT_MULTIPLIER_X = 1.5
    DEFAULT_MULTIPLIER_Y = 3.64

    # Long-haul rule: durations in [MIN, MAX] minutes are reported as REPORTED
    LONG_HAUL_MIN_MINUTES = 600
    LONG_HAUL_MAX_MINUTES = 1440
    LONG_HAUL_REPORTED_MINUTES = 1440

    # Input formats
    TIME_DIGITS = 4
    DATE_FORMAT = "%Y-%m-%d"

    MONTH_NAMES = [
        "January", "February", "March", "April", "May", "June",
        "July", "August", "September", "October", "November", "December"
    ]

    @classmethod
    def default_multipliers(cls) -> dict:
        """Default multiplier pair in persisted form"""
        return {"x": cls.DEFAULT_MULTIPLIER_X, "y": cls.DEFAULT_MULTIPLIER_Y}
