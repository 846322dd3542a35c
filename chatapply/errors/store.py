from .base import ChatApplyError


class BackupError(ChatApplyError):
    """A backup could not be written or restored."""


class HistoryError(ChatApplyError):
    """The history ledger could not be read or written."""
