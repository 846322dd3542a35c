from .blocks import CodeBlock, EditOperation, FunctionSpan
from .fence import FenceToken
from .results import ApplyResult, ApplyStatus, ApplySummary, HistoryEntry, UpdateKind

__all__ = [
    "CodeBlock",
    "FunctionSpan",
    "EditOperation",
    "FenceToken",
    "ApplyResult",
    "ApplyStatus",
    "ApplySummary",
    "HistoryEntry",
    "UpdateKind",
]
