"""Evaluation history storage."""

from repoeval.storage.history import HistoryStore, InMemoryHistoryStore, JsonHistoryStore

__all__ = ["HistoryStore", "InMemoryHistoryStore", "JsonHistoryStore"]
