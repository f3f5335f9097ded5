"""Base repository for a list of records stored under one state key."""

import logging
from typing import Callable, Generic, Optional, TypeVar

from ...core.exceptions import MalformedStateError, WealthTrackerError
from ..codec import RecordCodec
from ..database import get_db
from .state_repo import StateRepository

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RecordListRepository(Generic[T]):
    """Loads, looks up and saves a whole record list.

    A missing key yields the seed list. A key holding unreadable data also
    yields the seed list, with a warning, instead of failing.
    """

    _key: str
    _codec: RecordCodec[T]
    _seed: Callable[[], list[T]]
    _not_found: type[WealthTrackerError] = WealthTrackerError

    def __init__(self, state: Optional[StateRepository] = None):
        self.state = state or StateRepository()

    def list_all(self) -> list[T]:
        try:
            raw = self.state.get(self._key)
            if raw is None:
                return type(self)._seed()
            return self._codec.decode_all(raw)
        except MalformedStateError as e:
            logger.warning("Saved %s are unreadable (%s); using sample data", self._key, e)
            return type(self)._seed()

    def get_by_id(self, record_id: int) -> Optional[T]:
        return next((r for r in self.list_all() if r.id == record_id), None)

    def require(self, record_id: int) -> T:
        record = self.get_by_id(record_id)
        if record is None:
            raise self._not_found(f"{self._key[:-1].capitalize()} {record_id} not found")
        return record

    def save_all(self, records: list[T]) -> None:
        self.state.put(self._key, self._codec.encode_all(records))

    def delete(self, record_id: int) -> bool:
        with get_db().transaction():
            records = self.list_all()
            kept = [r for r in records if r.id != record_id]
            if len(kept) == len(records):
                return False
            self.save_all(kept)
        return True

    def _append(self, build: Callable[[list[T]], T]) -> T:
        """Build a record from the current list and save it at the end."""
        with get_db().transaction():
            records = self.list_all()
            record = build(records)
            records.append(record)
            self.save_all(records)
        return record

    def _replace(self, record_id: int, change: Callable[[T], T]) -> Optional[T]:
        """Apply change to the record with record_id and save. None if absent."""
        with get_db().transaction():
            records = self.list_all()
            for i, r in enumerate(records):
                if r.id == record_id:
                    records[i] = change(r)
                    self.save_all(records)
                    return records[i]
        return None
