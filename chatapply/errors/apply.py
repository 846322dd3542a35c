from .base import ChatApplyError


class ApplyError(ChatApplyError):
    """Applying a single code block to its target failed."""

    def __init__(self, path: str, message: str):
        super().__init__(message)
        self.path = path


class DirectoryCreateError(ApplyError):
    """The parent directory of a target file could not be created."""


class FileWriteError(ApplyError):
    """The new content could not be written to the target file."""
