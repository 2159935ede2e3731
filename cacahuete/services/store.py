from __future__ import annotations

import json
from dataclasses import dataclass, field

from ..extensions import db
from ..logging_config import get_logger
from ..models import StoredRecord


logger = get_logger(__name__)


@dataclass
class PersistedState:
    """
    The whole durable state of a draw on this device.

    Wire format (JSON object):
      {"assignments": {giver: receiver}, "taken": {receiver: true}, "completedCount": n}
    """
    assignments: dict[str, str] = field(default_factory=dict)
    taken: set[str] = field(default_factory=set)
    completed_count: int = 0

    @classmethod
    def empty(cls) -> PersistedState:
        return cls()

    def is_assigned(self, giver: str) -> bool:
        return giver in self.assignments

    def is_taken(self, name: str) -> bool:
        return name in self.taken

    def to_dict(self) -> dict:
        return {
            "assignments": dict(self.assignments),
            "taken": {name: True for name in sorted(self.taken)},
            "completedCount": self.completed_count,
        }

    @classmethod
    def from_dict(cls, data: object) -> PersistedState:
        """Build a state from a decoded record. Raises ValueError on a bad shape."""
        if not isinstance(data, dict):
            raise ValueError("Record is not a JSON object")

        assignments = data.get("assignments") or {}
        taken = data.get("taken") or {}
        completed_count = data.get("completedCount") or 0

        if not isinstance(assignments, dict) or not all(
            isinstance(k, str) and isinstance(v, str) for k, v in assignments.items()
        ):
            raise ValueError("Record assignments must map names to names")
        if not isinstance(taken, dict):
            raise ValueError("Record taken must be an object")
        if isinstance(completed_count, bool) or not isinstance(completed_count, int):
            raise ValueError("Record completedCount must be an integer")

        return cls(
            assignments=dict(assignments),
            taken={name for name, flag in taken.items() if flag},
            completed_count=completed_count,
        )


class RecordStore:
    """Single-record store keyed by the configured storage key."""

    def __init__(self, storage_key: str):
        self.storage_key = storage_key

    def _row(self) -> StoredRecord | None:
        return StoredRecord.query.filter_by(storage_key=self.storage_key).first()

    def load(self) -> PersistedState:
        row = self._row()
        if row is None:
            return PersistedState.empty()

        try:
            return PersistedState.from_dict(json.loads(row.payload))
        except ValueError as e:
            # Corrupt record: start over from an empty draw.
            logger.warning("corrupt_record_ignored", storage_key=self.storage_key, error=str(e))
            return PersistedState.empty()

    def save(self, state: PersistedState) -> None:
        row = self._row()
        if row is None:
            row = StoredRecord(storage_key=self.storage_key)
            db.session.add(row)

        row.payload = json.dumps(state.to_dict(), ensure_ascii=False)
        db.session.commit()

    def clear(self, reason: str = "manual") -> None:
        deleted = StoredRecord.query.filter_by(storage_key=self.storage_key).delete()
        db.session.commit()
        logger.info("record_cleared", storage_key=self.storage_key, reason=reason, existed=bool(deleted))
