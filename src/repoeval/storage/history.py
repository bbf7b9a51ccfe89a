"""Per-user evaluation history stores."""

from __future__ import annotations

import json
import logging
import os
import re
import threading
from abc import ABC, abstractmethod
from pathlib import Path

from pydantic import ValidationError

from repoeval.errors import HistoryStoreError
from repoeval.models.schemas import EvaluationRecord

logger = logging.getLogger(__name__)


class HistoryStore(ABC):
    """Base class for evaluation history storage.

    A user's history holds at most one record per (owner, repo_name).
    Upserting a record for a repository that is already present replaces
    the earlier record.
    """

    def __init__(self) -> None:
        self._locks: dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    @abstractmethod
    def get(self, user_id: str) -> list[EvaluationRecord]:
        """Return the user's evaluations, most recent first.

        Args:
            user_id: Identity of the user.

        Returns:
            List of records; empty if the user has no history.
        """
        ...

    @abstractmethod
    def _write(self, user_id: str, records: list[EvaluationRecord]) -> None:
        """Persist the complete history for a user."""
        ...

    def _read_for_update(self, user_id: str) -> list[EvaluationRecord]:
        """Read history ahead of a write. Stores may be stricter than get()."""
        return self.get(user_id)

    def upsert(self, user_id: str, record: EvaluationRecord) -> None:
        """Insert a record, replacing any record for the same repository.

        Args:
            user_id: Identity of the user.
            record: Evaluation record to store.

        Raises:
            HistoryStoreError: If the history cannot be read or written.
        """
        with self._lock_for(user_id):
            records = self._read_for_update(user_id)
            self._write(user_id, merge_record(records, record))
        logger.debug(f"Stored evaluation of {record.owner}/{record.repo_name} for {user_id}")

    def find(self, user_id: str, owner: str, repo_name: str) -> EvaluationRecord | None:
        """Return the current record for a repository, if any."""
        for record in self.get(user_id):
            if record.key == (owner, repo_name):
                return record
        return None

    def _lock_for(self, user_id: str) -> threading.Lock:
        with self._locks_guard:
            return self._locks.setdefault(user_id, threading.Lock())


def merge_record(
    records: list[EvaluationRecord],
    record: EvaluationRecord,
) -> list[EvaluationRecord]:
    """Replace or add a record, returning the history most recent first."""
    merged = [existing for existing in records if existing.key != record.key]
    merged.append(record)
    merged.sort(key=lambda r: r.evaluated_at, reverse=True)
    return merged


class InMemoryHistoryStore(HistoryStore):
    """History kept in process memory."""

    def __init__(self) -> None:
        super().__init__()
        self._history: dict[str, list[EvaluationRecord]] = {}

    def get(self, user_id: str) -> list[EvaluationRecord]:
        return list(self._history.get(user_id, []))

    def _write(self, user_id: str, records: list[EvaluationRecord]) -> None:
        self._history[user_id] = list(records)


class JsonHistoryStore(HistoryStore):
    """History stored as one JSON file per user.

    Layout:
        {data_dir}/history/{user_id}.json

    Files are replaced atomically on every write. An unreadable file is
    reported and treated as empty by get(), but upsert() refuses to
    overwrite it.
    """

    def __init__(self, data_dir: Path = Path("data")) -> None:
        super().__init__()
        self.history_dir = data_dir / "history"

    def path_for(self, user_id: str) -> Path:
        """Get the history file path for a user."""
        safe_name = re.sub(r"[^A-Za-z0-9_.-]", "_", user_id) or "_"
        return self.history_dir / f"{safe_name}.json"

    def get(self, user_id: str) -> list[EvaluationRecord]:
        try:
            return self._load(user_id)
        except HistoryStoreError as e:
            logger.warning(f"Ignoring unreadable history: {e}")
            return []

    def _read_for_update(self, user_id: str) -> list[EvaluationRecord]:
        return self._load(user_id)

    def _load(self, user_id: str) -> list[EvaluationRecord]:
        filepath = self.path_for(user_id)
        if not filepath.exists():
            return []

        try:
            data = json.loads(filepath.read_text(encoding="utf-8"))
            records = [EvaluationRecord.model_validate(item) for item in data["evaluations"]]
        except (OSError, json.JSONDecodeError, KeyError, TypeError, ValidationError) as e:
            raise HistoryStoreError(f"Could not parse {filepath}: {e}") from e

        records.sort(key=lambda r: r.evaluated_at, reverse=True)
        return records

    def _write(self, user_id: str, records: list[EvaluationRecord]) -> None:
        filepath = self.path_for(user_id)
        payload = {
            "user_id": user_id,
            "evaluations": [record.model_dump(mode="json") for record in records],
        }

        tmp_path = filepath.with_suffix(".json.tmp")
        try:
            self.history_dir.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
            os.replace(tmp_path, filepath)
        except OSError as e:
            raise HistoryStoreError(f"Could not write {filepath}: {e}") from e
