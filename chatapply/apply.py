# chatapply/apply.py
from __future__ import annotations

import logging
import os
import posixpath
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from ._logging import resolve_logger
from .classify import explain_classification
from .collaborators.backup import BackupStore
from .collaborators.history import HistoryStore, utc_timestamp
from .collaborators.workspace import Workspace
from .errors import ApplyError, DirectoryCreateError, FileWriteError
from .extract import extract_blocks
from .models.blocks import CodeBlock
from .models.results import ApplyResult, ApplyStatus, ApplySummary, HistoryEntry, UpdateKind
from .options import ApplyOptions
from .plan import apply_edits, build_patch_plan
from .utils.diff import unified_diff
from .utils.fs import resolve_filename

log = logging.getLogger(__name__)

ConfirmCallback = Callable[[str, Sequence[str]], Optional[str]]

DIFF_OPTIONS = ("Apply", "Cancel")
OVERWRITE_OPTIONS = ("Yes", "No")


class CodeApplier:
    """
    Applies code blocks from chat text to a workspace, one block at a time.

    Every collaborator is injected: `workspace` does the file I/O, `confirm`
    asks the user (None accepts everything), `backup_store` and
    `history_store` keep undo information, and `open_for_view` is handed the
    written files after the batch. Blocks are processed strictly in order, so
    several blocks for the same file land in document order. A failing block
    is reported and never stops the blocks after it.
    """

    def __init__(
        self,
        workspace: Workspace,
        *,
        options: Optional[ApplyOptions] = None,
        confirm: Optional[ConfirmCallback] = None,
        backup_store: Optional[BackupStore] = None,
        history_store: Optional[HistoryStore] = None,
        open_for_view: Optional[Callable[[str], None]] = None,
        log_callback: Optional[Callable[[str], None]] = None,
        logger: logging.Logger | None = None,
        log: bool = False,
    ):
        self.workspace = workspace
        self.options = options or ApplyOptions()
        self.confirm = confirm
        self.backup_store = backup_store
        self.history_store = history_store
        self.open_for_view = open_for_view
        self.log_callback = log_callback
        self._lg = resolve_logger(logger=logger, enabled=log, name=__name__)

    def _log(self, msg: str) -> None:
        if self.log_callback:
            self.log_callback(msg)
        self._lg.info(msg)

    # ---------- batch entry points ----------

    def apply_text(self, text: Optional[str]) -> ApplySummary:
        """Extract the blocks of `text` and apply them. Empty input writes nothing."""
        if not text or not text.strip():
            self._log("Nothing to apply: no text was provided.")
            return ApplySummary(nothing_to_apply=True, dry_run=self.options.dry_run)
        blocks = extract_blocks(text)
        if not blocks:
            self._log("Nothing to apply: no code blocks with file paths were found.")
            return ApplySummary(nothing_to_apply=True, dry_run=self.options.dry_run)
        return self.apply_blocks(blocks)

    def apply_blocks(self, blocks: Iterable[CodeBlock]) -> ApplySummary:
        summary = ApplySummary(dry_run=self.options.dry_run)
        written: List[str] = []
        for block in blocks:
            result = self._apply_one(block)
            summary.results.append(result)
            if result.status in (ApplyStatus.CREATED, ApplyStatus.UPDATED) and not self.options.dry_run:
                if result.file_path not in written:
                    written.append(result.file_path)

        summary.opened = self._open_written(written)
        return summary

    def _apply_one(self, block: CodeBlock) -> ApplyResult:
        target = block.file_path
        try:
            target = self.resolve_target(block.file_path)
            return self.apply_block(block, target)
        except ApplyError as e:
            self._log(f"  ✘ Failed to apply {target}: {e}")
            return ApplyResult(target, ApplyStatus.FAILED, str(e))
        except Exception as e:
            log.exception("Unexpected error while applying %s", target)
            self._log(f"  ✘ Failed to apply {target}: {e}")
            return ApplyResult(target, ApplyStatus.FAILED, str(e))

    # ---------- per block ----------

    def resolve_target(self, file_path: str) -> str:
        """Map a block's path hint to a workspace path."""
        path = file_path.strip().replace("\\", "/")
        if os.path.isabs(path):
            return path
        if self.options.default_save_folder:
            folder = self.options.default_save_folder.strip().replace("\\", "/")
            return posixpath.normpath(posixpath.join(folder, path))
        resolved, path_logs = resolve_filename(posixpath.normpath(path), self.workspace)
        for msg in path_logs:
            self._log(msg)
        return resolved

    def apply_block(self, block: CodeBlock, target: str) -> ApplyResult:
        """Apply one block to the already-resolved `target`."""
        if self.workspace.file_exists(target):
            existing = self.workspace.read_file(target)
            return self._update_existing(block, target, existing)
        return self._create_new(block, target)

    def _updated_content(self, code: str, existing: str) -> Tuple[str, str]:
        """New file content plus a short description of how it was produced."""
        verdict, rule = explain_classification(code)
        self._lg.debug("Classified block as %s (rule: %s)", verdict.value, rule)
        if verdict is UpdateKind.FULL:
            return code, "replaced file"
        plan = build_patch_plan(
            existing, code, insert_new=self.options.insert_new_functions, logger=self._lg
        )
        return apply_edits(existing, plan.operations), f"partial update ({plan.tier}, {len(plan.operations)} edit(s))"

    def _update_existing(self, block: CodeBlock, target: str, existing: str) -> ApplyResult:
        new_content, how = self._updated_content(block.code, existing)

        if not self._confirm_overwrite(target, existing, new_content):
            self._log(f"  - Skipped {target}: declined by user.")
            return ApplyResult(target, ApplyStatus.SKIPPED, "declined by user")

        if self.options.dry_run:
            return ApplyResult(target, ApplyStatus.UPDATED, f"DRY RUN: would apply {how}")

        self._backup(target, existing, how)
        self._write(target, new_content)
        self._log(f"  ✔ Updated {target}: {how}")
        return ApplyResult(target, ApplyStatus.UPDATED, how)

    def _create_new(self, block: CodeBlock, target: str) -> ApplyResult:
        if self.options.confirm_new_files and self.confirm is not None:
            answer = self.confirm(f'File "{target}" does not exist. Create a new file?', OVERWRITE_OPTIONS)
            if answer != "Yes":
                self._log(f"  - Skipped {target}: declined by user.")
                return ApplyResult(target, ApplyStatus.SKIPPED, "declined by user")

        if self.options.dry_run:
            return ApplyResult(target, ApplyStatus.CREATED, f"DRY RUN: would create file ({len(block.code)} chars)")

        parent = posixpath.dirname(target)
        if parent:
            try:
                self.workspace.create_directory(parent)
            except OSError as e:
                raise DirectoryCreateError(target, f"Failed to create directory for {target}: {e}") from e
        self._write(target, block.code)
        self._log(f"  ✔ Created {target}")
        return ApplyResult(target, ApplyStatus.CREATED, "created file")

    # ---------- collaborator calls ----------

    def _confirm_overwrite(self, target: str, existing: str, new_content: str) -> bool:
        if self.confirm is None:
            return True
        if self.options.enable_diff_preview:
            name = posixpath.basename(target)
            diff = unified_diff(existing, new_content, target) or "(no changes)\n"
            answer = self.confirm(f"Apply changes to {name}?\n{diff}", DIFF_OPTIONS)
            return answer == "Apply"
        answer = self.confirm(f'File "{target}" already exists. Overwrite?', OVERWRITE_OPTIONS)
        return answer == "Yes"

    def _backup(self, target: str, existing: str, how: str) -> None:
        """Back up the old content and link it in the history; failures never block the write."""
        if not self.options.enable_backups or self.backup_store is None:
            return
        absolute = target
        try:
            # absolute_path is optional on duck-typed workspaces
            resolve = getattr(self.workspace, "absolute_path", None)
            if resolve is not None:
                absolute = resolve(target)
            ref = self.backup_store.backup(absolute, existing)
        except Exception as e:
            log.warning("Backup of %s failed: %s", target, e)
            ref = None
        if not ref:
            self._log(f"  - WARNING: No backup for {target}; the change will not appear in history.")
            return
        if self.history_store is None:
            return
        entry = HistoryEntry(
            file_path=absolute,
            backup_ref=ref,
            description=f"Applied code block ({how})",
            timestamp=utc_timestamp(),
        )
        try:
            if not self.history_store.record(entry):
                log.warning("History entry for %s was not recorded", target)
        except Exception as e:
            log.warning("Recording history for %s failed: %s", target, e)

    def _write(self, target: str, content: str) -> None:
        try:
            self.workspace.write_file(target, content)
        except OSError as e:
            raise FileWriteError(target, f"Failed to save {target}: {e}") from e

    def _open_written(self, written: List[str]) -> List[str]:
        if self.open_for_view is None or not written:
            return []
        limit = max(self.options.max_files_to_open, 0)
        opened: List[str] = []
        for path in written[:limit]:
            try:
                self.open_for_view(path)
                opened.append(path)
            except Exception as e:
                log.warning("Failed to open %s: %s", path, e)
        if len(written) > limit:
            self._log(f"Only opened {limit} out of {len(written)} files to avoid cluttering.")
        return opened


def apply_text(
    text: str,
    workspace: Workspace,
    *,
    options: Optional[ApplyOptions] = None,
    **collaborators,
) -> ApplySummary:
    """Convenience wrapper: build a CodeApplier and apply all blocks in `text`."""
    return CodeApplier(workspace, options=options, **collaborators).apply_text(text)
