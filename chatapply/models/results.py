from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class UpdateKind(str, Enum):
    FULL = "full"
    PARTIAL = "partial"


class ApplyStatus(str, Enum):
    CREATED = "created"
    UPDATED = "updated"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass
class ApplyResult:
    """Outcome of applying one code block."""

    file_path: str
    status: ApplyStatus
    detail: str = ""


@dataclass
class HistoryEntry:
    """One line of the apply history: which file was changed and where its backup lives."""

    file_path: str
    backup_ref: str
    description: str
    timestamp: str

    def to_dict(self) -> dict:
        return {
            "filePath": self.file_path,
            "backupPath": self.backup_ref,
            "description": self.description,
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "HistoryEntry":
        return cls(
            file_path=data.get("filePath", ""),
            backup_ref=data.get("backupPath", ""),
            description=data.get("description", ""),
            timestamp=data.get("timestamp", ""),
        )


@dataclass
class ApplySummary:
    """Outcome of applying a batch of code blocks."""

    results: List[ApplyResult] = field(default_factory=list)
    # Paths handed to the viewer after the batch, capped by max_files_to_open
    opened: List[str] = field(default_factory=list)
    nothing_to_apply: bool = False
    dry_run: bool = False

    @property
    def success_count(self) -> int:
        return sum(
            1 for r in self.results if r.status in (ApplyStatus.CREATED, ApplyStatus.UPDATED)
        )

    @property
    def skipped(self) -> List[ApplyResult]:
        return [r for r in self.results if r.status is ApplyStatus.SKIPPED]

    @property
    def failed(self) -> List[ApplyResult]:
        return [r for r in self.results if r.status is ApplyStatus.FAILED]

    def result_for(self, file_path: str) -> Optional[ApplyResult]:
        """Last result recorded for `file_path`, if any."""
        for r in reversed(self.results):
            if r.file_path == file_path:
                return r
        return None

    def message(self) -> str:
        """One aggregate success line followed by itemized skip/fail reasons."""
        if self.nothing_to_apply:
            return "Nothing to apply: no code blocks with file paths were found."
        prefix = "DRY RUN: " if self.dry_run else ""
        lines = [f"{prefix}{self.success_count} file(s) created/updated successfully."]
        for r in self.skipped:
            lines.append(f"  skipped {r.file_path}: {r.detail}")
        for r in self.failed:
            lines.append(f"  failed {r.file_path}: {r.detail}")
        return "\n".join(lines)
