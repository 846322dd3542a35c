from .backup import BackupStore, DirectoryBackupStore
from .history import HistoryStore, JsonHistoryStore, utc_timestamp
from .workspace import LocalWorkspace, Workspace

__all__ = [
    "Workspace",
    "LocalWorkspace",
    "BackupStore",
    "DirectoryBackupStore",
    "HistoryStore",
    "JsonHistoryStore",
    "utc_timestamp",
]
