# chatapply/collaborators/history.py
from __future__ import annotations

import json
import logging
import os
from datetime import datetime, timezone
from typing import List, Optional

from ..errors import HistoryError
from ..models.results import HistoryEntry
from ..options import DEFAULT_BACKUP_LOCATION, HISTORY_FILENAME

log = logging.getLogger(__name__)


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


class HistoryStore:
    """Ledger of applied changes, each linked to the backup taken before it."""

    def record(self, entry: HistoryEntry) -> bool:
        raise NotImplementedError


class JsonHistoryStore(HistoryStore):
    """History kept newest first in a JSON file, capped at `max_items` entries."""

    def __init__(self, path: Optional[str] = None, max_items: int = 50):
        self.path = os.path.expanduser(path or os.path.join(DEFAULT_BACKUP_LOCATION, HISTORY_FILENAME))
        self.max_items = max_items
        self._entries: Optional[List[HistoryEntry]] = None

    def load(self) -> List[HistoryEntry]:
        """(Re)read the ledger, dropping entries whose backup no longer exists."""
        entries: List[HistoryEntry] = []
        if os.path.exists(self.path):
            try:
                with open(self.path, "r", encoding="utf-8") as f:
                    raw = json.load(f)
            except (OSError, ValueError) as e:
                log.error("Error loading history from %s: %s", self.path, e)
                raw = []
            for item in raw if isinstance(raw, list) else []:
                if not isinstance(item, dict):
                    continue
                entry = HistoryEntry.from_dict(item)
                if entry.backup_ref and os.path.exists(entry.backup_ref):
                    entries.append(entry)
        self._entries = entries
        return list(entries)

    def entries(self) -> List[HistoryEntry]:
        if self._entries is None:
            self.load()
        return list(self._entries or [])

    def latest(self) -> Optional[HistoryEntry]:
        entries = self.entries()
        return entries[0] if entries else None

    def _save(self) -> None:
        try:
            os.makedirs(os.path.dirname(self.path) or ".", exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump([e.to_dict() for e in self._entries or []], f, indent=2)
        except OSError as e:
            raise HistoryError(f"Failed to save history to '{self.path}': {e}") from e

    def record(self, entry: HistoryEntry) -> bool:
        if not entry.file_path or not entry.backup_ref:
            return False
        if not entry.timestamp:
            entry.timestamp = utc_timestamp()
        entries = self.entries()
        entries.insert(0, entry)
        self._entries = entries[: self.max_items]
        try:
            self._save()
        except HistoryError as e:
            log.error("%s", e)
            return False
        return True

    def clear(self) -> None:
        self._entries = []
        self._save()
