"""
Flight log store: the authoritative collection of logged legs
"""
import uuid
import logging
from datetime import date
from typing import Any, Callable, Dict, List, Optional, Tuple

from config import FlightLogConfig
from models import FlightLog, Multipliers, StoreState, StorageUnavailable
from migrations import migrate
from storage import JsonFileStorage
from utils import compute_duration_minutes, parse_date, validate_numeric_input

Listener = Callable[[StoreState], None]


def _new_id() -> str:
    return uuid.uuid4().hex


class FlightLogStore:
    """In-memory flight log with write-through persistence

    Every mutation is persisted before it returns. Storage failures are
    logged and swallowed; the in-memory state stays authoritative for the
    session.
    """

    def __init__(self, storage, key: str = FlightLogConfig.STORAGE_KEY,
                 id_factory: Callable[[], str] = _new_id,
                 today: Optional[Callable[[], date]] = None):
        self.storage = storage
        self.key = key
        self.id_factory = id_factory
        self.today = today or date.today
        self.logger = logging.getLogger(__name__)
        self._state = StoreState()
        self._listeners: List[Listener] = []
        # Persisted records that could not be hydrated; written back untouched
        self._unreadable: List[Any] = []

    @classmethod
    def from_config(cls, config_manager) -> "FlightLogStore":
        """Build a file-backed store from the `storage` config section and load it"""
        directory = config_manager.get("storage", "directory")
        key = config_manager.get("storage", "key", FlightLogConfig.STORAGE_KEY)
        store = cls(JsonFileStorage(directory), key=key)
        store.load()
        return store

    # Read side

    @property
    def logs(self) -> Tuple[FlightLog, ...]:
        return self._state.logs

    @property
    def multipliers(self) -> Multipliers:
        return self._state.multipliers

    def get_state(self) -> StoreState:
        return self._state

    def get_log(self, log_id: str) -> Optional[FlightLog]:
        for log in self._state.logs:
            if log.id == log_id:
                return log
        return None

    # Mutations

    def add_log(self, departure_date: str, arrival_date: str, dep_time: str, arr_time: str,
                multiplier_x: float, multiplier_y: float) -> FlightLog:
        """
        Log a new flight leg

        The duration is computed here and frozen on the record together with
        the supplied multiplier pair. A zero duration is stored as-is; callers
        gate entry with FlightEntryValidator.

        Returns:
            The newly created record
        """
        duration = compute_duration_minutes(departure_date, dep_time, arrival_date, arr_time)
        log = FlightLog(
            id=self.id_factory(),
            departure_date=self._iso_date(departure_date),
            arrival_date=self._iso_date(arrival_date),
            dep_time=dep_time,
            arr_time=arr_time,
            duration_minutes=duration,
            multiplier_x=validate_numeric_input(multiplier_x, "multiplier_x"),
            multiplier_y=validate_numeric_input(multiplier_y, "multiplier_y"),
        )

        self._commit(StoreState(logs=(log,) + self._state.logs, multipliers=self._state.multipliers))
        self.logger.info(f"Added flight {log.id}: {log.departure_date} {dep_time} -> "
                         f"{log.arrival_date} {arr_time} ({duration} min)")
        return log

    @staticmethod
    def _iso_date(value: Any) -> Any:
        try:
            return parse_date(value).isoformat()
        except (ValueError, TypeError, AttributeError):
            return value

    def remove_log(self, log_id: str) -> None:
        """Delete the record with this id; unknown ids are ignored"""
        remaining = tuple(log for log in self._state.logs if log.id != log_id)
        if len(remaining) == len(self._state.logs):
            self.logger.debug(f"remove_log: no flight with id {log_id}")
            return

        self._commit(StoreState(logs=remaining, multipliers=self._state.multipliers))
        self.logger.info(f"Removed flight {log_id}")

    def set_multipliers(self, x: float, y: float) -> None:
        """Replace the default multipliers used for new records"""
        multipliers = Multipliers(validate_numeric_input(x, "x"), validate_numeric_input(y, "y"))
        self._commit(StoreState(logs=self._state.logs, multipliers=multipliers))
        self.logger.info(f"Default multipliers set to x={multipliers.x} y={multipliers.y}")

    # Subscriptions

    def subscribe(self, listener: Listener) -> Tuple[StoreState, Callable[[], None]]:
        """
        Register a listener called with the new state after every mutation

        Returns:
            (current snapshot, unsubscribe function)
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return self._state, unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self._state)
            except Exception as e:
                self.logger.error(f"Store listener {listener!r} failed: {e}")

    # Persistence

    def _commit(self, state: StoreState) -> None:
        self._state = state
        self._persist()
        self._notify()

    def _persist(self) -> None:
        state = self._state.to_dict()
        state["logs"].extend(self._unreadable)
        blob = {
            "state": state,
            "version": FlightLogConfig.CURRENT_SCHEMA_VERSION,
        }
        try:
            self.storage.save(self.key, blob)
        except StorageUnavailable as e:
            self.logger.warning(f"Flight log not persisted: {e}")

    def load(self) -> StoreState:
        """
        Rehydrate from storage, migrating older schema versions

        A missing, unreadable or malformed blob leaves the store empty.
        """
        self._unreadable = []
        try:
            blob = self.storage.load(self.key)
        except StorageUnavailable as e:
            self.logger.warning(f"Could not load flight log, starting empty: {e}")
            blob = None

        if blob is None:
            self._state = StoreState()
        elif not isinstance(blob, dict) or not isinstance(blob.get("state"), dict):
            self.logger.warning(f"Ignoring malformed flight log blob under '{self.key}'")
            self._state = StoreState()
        else:
            version = blob.get("version", 0)
            if not isinstance(version, int):
                version = 0
            state = migrate(blob["state"], version, today=self.today())
            self._state = self._hydrate(state)
            self.logger.info(f"Loaded {len(self._state.logs)} flight(s) from schema v{version}")

        self._notify()
        return self._state

    def _hydrate(self, state: Dict[str, Any]) -> StoreState:
        logs = []
        for record in state.get("logs") or []:
            if not isinstance(record, dict):
                self.logger.warning(f"Keeping unreadable flight record as persisted: {record!r}")
                self._unreadable.append(record)
                continue
            if not record.get("id"):
                record = dict(record, id=self.id_factory())
            try:
                logs.append(FlightLog.from_dict(record))
            except (TypeError, ValueError) as e:
                self.logger.warning(f"Keeping unreadable flight record {record.get('id')} as persisted: {e}")
                self._unreadable.append(record)

        try:
            multipliers = Multipliers.from_dict(state.get("multipliers"))
        except (TypeError, ValueError) as e:
            self.logger.warning(f"Invalid persisted multipliers, using defaults: {e}")
            multipliers = Multipliers()

        return StoreState(logs=tuple(logs), multipliers=multipliers)
