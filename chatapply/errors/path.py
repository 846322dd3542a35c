from .base import ChatApplyError


class PathViolation(ChatApplyError):
    """A target path resolves outside of the workspace root."""
