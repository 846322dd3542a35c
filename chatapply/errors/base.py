class ChatApplyError(Exception):
    """Base class for every error raised by chatapply."""
