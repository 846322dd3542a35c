# chatapply/collaborators/backup.py
from __future__ import annotations

import logging
import os
import re
from datetime import datetime, timezone
from typing import List, Optional

from ..errors import BackupError
from ..options import DEFAULT_BACKUP_LOCATION

log = logging.getLogger(__name__)

_BACKUP_SUFFIX_RE = re.compile(r"\.\d{4}-\d{2}-\d{2}T\d{2}-\d{2}-\d{2}-\d{6}Z(?:-\d+)?\.bak$")


def _timestamp() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H-%M-%S-%fZ")


class BackupStore:
    """Keeps a copy of a file's content before it is overwritten."""

    def backup(self, path: str, content: str) -> Optional[str]:
        """Store `content` and return a reference to it, or None on failure."""
        raise NotImplementedError


class DirectoryBackupStore(BackupStore):
    """
    Backups as `<basename>.<timestamp>.bak` files in one directory, newest
    first, with the oldest removed once `max_backups` is exceeded.
    """

    def __init__(self, backup_dir: str = DEFAULT_BACKUP_LOCATION, max_backups: int = 50):
        self.backup_dir = os.path.expanduser(backup_dir)
        self.max_backups = max_backups
        self._backups: Optional[List[str]] = None

    def _load(self) -> List[str]:
        if self._backups is not None:
            return self._backups
        backups: List[str] = []
        if os.path.isdir(self.backup_dir):
            for name in os.listdir(self.backup_dir):
                full = os.path.join(self.backup_dir, name)
                if name.endswith(".bak") and os.path.isfile(full):
                    backups.append(full)
        # Newest first; the name breaks ties between same-mtime backups.
        backups.sort(key=lambda p: (os.path.getmtime(p), os.path.basename(p)), reverse=True)
        self._backups = backups
        self._trim()
        return self._backups

    def _trim(self) -> None:
        backups = self._backups or []
        while len(backups) > self.max_backups:
            oldest = backups.pop()
            try:
                os.remove(oldest)
            except OSError as e:
                log.warning("Failed to remove old backup %s: %s", oldest, e)

    def backup(self, path: str, content: str) -> Optional[str]:
        backups = self._load()
        try:
            os.makedirs(self.backup_dir, exist_ok=True)
            stem = f"{os.path.basename(path)}.{_timestamp()}"
            target = os.path.join(self.backup_dir, f"{stem}.bak")
            counter = 1
            while os.path.exists(target):
                target = os.path.join(self.backup_dir, f"{stem}-{counter}.bak")
                counter += 1
            with open(target, "w", encoding="utf-8") as f:
                f.write(content)
        except OSError as e:
            log.error("Failed to create backup for %s: %s", path, e)
            return None

        backups.insert(0, target)
        self._trim()
        log.debug("Backed up %s to %s", path, target)
        return target

    def backups(self) -> List[str]:
        """Backup files, newest first."""
        return list(self._load())

    def latest(self) -> Optional[str]:
        backups = self._load()
        return backups[0] if backups else None

    def read(self, ref: str) -> str:
        try:
            with open(ref, "r", encoding="utf-8") as f:
                return f.read()
        except OSError as e:
            raise BackupError(f"Failed to read backup '{ref}': {e}") from e

    def restore(self, ref: str, target: str) -> None:
        """Write the content of backup `ref` over `target`."""
        content = self.read(ref)
        try:
            with open(target, "w", encoding="utf-8") as f:
                f.write(content)
        except OSError as e:
            raise BackupError(f"Failed to restore '{ref}' to '{target}': {e}") from e
        log.info("Restored %s from %s", target, ref)

    @staticmethod
    def original_name(ref: str) -> str:
        """The basename of the file a backup was taken from."""
        return _BACKUP_SUFFIX_RE.sub("", os.path.basename(ref))
