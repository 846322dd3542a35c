from .apply import ApplyError, DirectoryCreateError, FileWriteError
from .base import ChatApplyError
from .path import PathViolation
from .plan import EditRangeError, OverlappingEditsError, PlanError
from .store import BackupError, HistoryError

__all__ = [
    "ChatApplyError",
    "ApplyError",
    "DirectoryCreateError",
    "FileWriteError",
    "BackupError",
    "HistoryError",
    "PlanError",
    "OverlappingEditsError",
    "EditRangeError",
    "PathViolation",
]
