"""
Schema migration for persisted flight-log state

Persisted state is tagged with an integer schema version. Each entry of
MIGRATION_STEPS upgrades the state to its target version and runs only when
the stored version is below that target, so re-running on upgraded data is a
no-op. Steps only ever add missing keys; existing keys and records are kept.
"""
import copy
import uuid
import logging
from datetime import date
from typing import Any, Callable, Dict, List, Optional, Tuple

from config import FlightLogConfig
from utils import compute_duration_minutes

logger = logging.getLogger(__name__)

MigrationStep = Callable[[Dict[str, Any], date], Dict[str, Any]]


def _records(state: Dict[str, Any]) -> List[Any]:
    logs = state.get("logs")
    if not isinstance(logs, list):
        logs = []
        state["logs"] = logs
    return logs


def _fill_identity(record: Dict[str, Any]) -> None:
    """Give a record an id and a duration if it has neither

    The duration is recomputed from the record's own dates, which carry no
    wraparound: a legacy overnight leg whose single date was copied into both
    fields comes out as 0 minutes.
    """
    if not record.get("id"):
        record["id"] = uuid.uuid4().hex

    if "durationMinutes" not in record:
        record["durationMinutes"] = compute_duration_minutes(
            record.get("departureDate"), record.get("depTime"),
            record.get("arrivalDate"), record.get("arrTime")
        )
        if record["durationMinutes"] == 0:
            logger.warning(f"Recomputed duration of record {record['id']} is 0 minutes; "
                           f"check its arrival date")


def split_departure_arrival_dates(state: Dict[str, Any], today: date) -> Dict[str, Any]:
    """v0 -> v1: single `date` field becomes departureDate/arrivalDate"""
    fallback = today.isoformat()
    upgraded = 0

    for record in _records(state):
        if not isinstance(record, dict):
            continue

        legacy_date = record.get("date") or fallback
        if "departureDate" not in record:
            record["departureDate"] = legacy_date
            upgraded += 1
        if "arrivalDate" not in record:
            record["arrivalDate"] = legacy_date

        _fill_identity(record)

    logger.info(f"Split legacy date field on {upgraded} record(s)")
    return state


def snapshot_multipliers(state: Dict[str, Any], today: date) -> Dict[str, Any]:
    """v2 -> v3: copy the global default multipliers onto each record"""
    defaults = FlightLogConfig.default_multipliers()
    persisted = state.get("multipliers")
    if isinstance(persisted, dict):
        defaults.update({k: persisted[k] for k in ("x", "y") if k in persisted})
    else:
        state["multipliers"] = dict(defaults)

    upgraded = 0
    for record in _records(state):
        if not isinstance(record, dict):
            continue

        if "multiplierX" not in record:
            record["multiplierX"] = defaults["x"]
            upgraded += 1
        if "multiplierY" not in record:
            record["multiplierY"] = defaults["y"]

        _fill_identity(record)

    logger.info(f"Snapshotted multipliers x={defaults['x']} y={defaults['y']} on {upgraded} record(s)")
    return state


# (target_version, step); v2 had no shape change
MIGRATION_STEPS: List[Tuple[int, MigrationStep]] = [
    (1, split_departure_arrival_dates),
    (3, snapshot_multipliers),
]


def migrate(state: Optional[Dict[str, Any]], stored_version: int,
            today: Optional[date] = None) -> Dict[str, Any]:
    """
    Upgrade persisted state to the current schema version

    Args:
        state: The persisted `state` object (logs + multipliers)
        stored_version: Version the state was saved under
        today: Date used for records with no date at all (defaults to today)

    Returns:
        A new, upgraded state dict; the input is never modified
    """
    upgraded = copy.deepcopy(state) if isinstance(state, dict) else {}

    if stored_version >= FlightLogConfig.CURRENT_SCHEMA_VERSION:
        return upgraded

    today = today or date.today()
    for target_version, step in MIGRATION_STEPS:
        if stored_version < target_version:
            logger.info(f"Migrating flight log state to v{target_version} ({step.__name__})")
            upgraded = step(upgraded, today)

    return upgraded
