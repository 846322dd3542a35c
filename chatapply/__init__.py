from .apply import CodeApplier, apply_text
from .classify import classify_update, explain_classification, is_partial_update
from .collaborators import (
    BackupStore,
    DirectoryBackupStore,
    HistoryStore,
    JsonHistoryStore,
    LocalWorkspace,
    Workspace,
)
from .errors import (
    ApplyError,
    BackupError,
    ChatApplyError,
    HistoryError,
    OverlappingEditsError,
    PathViolation,
    PlanError,
)
from .extract import extract_blocks
from .index import index_functions
from .models import (
    ApplyResult,
    ApplyStatus,
    ApplySummary,
    CodeBlock,
    EditOperation,
    FunctionSpan,
    HistoryEntry,
    UpdateKind,
)
from .options import ApplyOptions
from .plan import apply_edits, build_patch_plan, plan_edits
from .utils.fs import resolve_filename

__version__ = "0.1.0"

__all__ = [
    "extract_blocks",
    "index_functions",
    "classify_update",
    "explain_classification",
    "is_partial_update",
    "plan_edits",
    "build_patch_plan",
    "apply_edits",
    "CodeApplier",
    "apply_text",
    "resolve_filename",
    "ApplyOptions",
    "CodeBlock",
    "FunctionSpan",
    "EditOperation",
    "UpdateKind",
    "ApplyResult",
    "ApplyStatus",
    "ApplySummary",
    "HistoryEntry",
    "Workspace",
    "LocalWorkspace",
    "BackupStore",
    "DirectoryBackupStore",
    "HistoryStore",
    "JsonHistoryStore",
    "ChatApplyError",
    "ApplyError",
    "PlanError",
    "OverlappingEditsError",
    "BackupError",
    "HistoryError",
    "PathViolation",
]
