"""
`chatapply` command line.

Commands
--------
chatapply apply [FILE|-]          -- apply the code blocks of a chat reply
chatapply apply --clipboard       -- ... read from the system clipboard
chatapply blocks [FILE|-]         -- list extracted blocks and how they would apply
chatapply revert [--entry N]      -- restore the file changed by the latest (or Nth) apply
chatapply history                 -- list recorded changes, newest first
chatapply clear-history           -- forget all recorded changes

Exit status: 0 on success, 1 when a block or command failed, 2 on usage errors.
"""
from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import Callable, Optional, Sequence

from .apply import CodeApplier
from .classify import explain_classification
from .collaborators import DirectoryBackupStore, JsonHistoryStore, LocalWorkspace
from .errors import BackupError, ChatApplyError, HistoryError
from .extract import extract_blocks
from .options import DEFAULT_BACKUP_LOCATION, HISTORY_FILENAME, ApplyOptions
from .system import open_in_viewer, read_clipboard

log = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_USAGE = 2


class UsageError(Exception):
    """Bad invocation detected after argument parsing."""


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def console_confirm(
    prompt: str,
    options: Sequence[str],
    *,
    input_fn: Optional[Callable[[str], str]] = None,
    out=None,
) -> Optional[str]:
    """
    Ask on the terminal. Accepts an option's full name or its first letter,
    case-insensitively. Returns None (a decline) on EOF or an empty answer.
    """
    input_fn = input_fn or input
    out = out or sys.stdout
    print(prompt, file=out)
    choices = "/".join(options)
    while True:
        try:
            answer = input_fn(f"[{choices}] ").strip().lower()
        except EOFError:
            return None
        if not answer:
            return None
        for option in options:
            if answer in (option.lower(), option[0].lower()):
                return option
        print(f"Please answer one of: {choices}", file=out)


def _read_input(args: argparse.Namespace) -> str:
    if getattr(args, "clipboard", False):
        if args.file not in (None, "-"):
            raise UsageError("--clipboard cannot be combined with an input file")
        return read_clipboard()
    if args.file in (None, "-"):
        return sys.stdin.read()
    try:
        with open(args.file, "r", encoding="utf-8") as f:
            return f.read()
    except OSError as e:
        raise UsageError(f"Cannot read {args.file}: {e}") from e


def _history_store(args: argparse.Namespace) -> JsonHistoryStore:
    return JsonHistoryStore(os.path.join(args.backup_dir, HISTORY_FILENAME), max_items=args.max_history)


def _options_from_args(args: argparse.Namespace) -> ApplyOptions:
    return ApplyOptions(
        base_path=args.base,
        default_save_folder=args.save_folder or "",
        enable_diff_preview=not args.no_diff,
        confirm_new_files=args.confirm_new,
        enable_backups=not args.no_backup,
        backup_location=args.backup_dir,
        max_history_items=args.max_history,
        max_files_to_open=args.max_open,
        dry_run=args.dry_run,
        insert_new_functions=args.insert_new,
    )


# ---------------------------------------------------------------------------
# Sub-command handlers
# ---------------------------------------------------------------------------

def _cmd_apply(args: argparse.Namespace) -> int:
    text = _read_input(args)
    options = _options_from_args(args)
    backups = history = None
    if options.enable_backups and not options.dry_run:
        backups = DirectoryBackupStore(options.backup_location, max_backups=options.max_history_items)
        history = _history_store(args)

    applier = CodeApplier(
        LocalWorkspace(options.base_path),
        options=options,
        confirm=None if args.yes else console_confirm,
        backup_store=backups,
        history_store=history,
        open_for_view=open_in_viewer if args.open else None,
        log_callback=print,
    )
    summary = applier.apply_text(text)
    print(summary.message())
    return EXIT_FAILED if summary.failed else EXIT_OK


def _cmd_blocks(args: argparse.Namespace) -> int:
    blocks = extract_blocks(_read_input(args))
    if not blocks:
        print("No code blocks with file paths were found.")
        return EXIT_OK
    for i, block in enumerate(blocks, 1):
        verdict, rule = explain_classification(block.code)
        lang = block.language or "-"
        print(f"{i:>3}. {block.file_path}  [{lang}]  {verdict.value} ({rule}), {len(block.code)} chars")
    return EXIT_OK


def _cmd_revert(args: argparse.Namespace) -> int:
    entries = _history_store(args).entries()
    if not entries:
        print("Nothing to revert: the history is empty.", file=sys.stderr)
        return EXIT_FAILED
    if not 1 <= args.entry <= len(entries):
        raise UsageError(f"--entry must be between 1 and {len(entries)}")
    entry = entries[args.entry - 1]
    store = DirectoryBackupStore(args.backup_dir, max_backups=args.max_history)
    try:
        store.restore(entry.backup_ref, entry.file_path)
    except BackupError as e:
        print(str(e), file=sys.stderr)
        return EXIT_FAILED
    print(f"Successfully restored {entry.file_path}")
    return EXIT_OK


def _cmd_history(args: argparse.Namespace) -> int:
    entries = _history_store(args).entries()
    if not entries:
        print("No history yet.")
        return EXIT_OK
    for i, entry in enumerate(entries, 1):
        print(f"{i:>3}. {entry.timestamp}  {entry.file_path}  {entry.description}")
    return EXIT_OK


def _cmd_clear_history(args: argparse.Namespace) -> int:
    try:
        _history_store(args).clear()
    except HistoryError as e:
        print(str(e), file=sys.stderr)
        return EXIT_FAILED
    print("History cleared.")
    return EXIT_OK


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="chatapply",
        description="Apply code blocks from chat replies to files in a workspace.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug output to stderr")
    parser.add_argument(
        "--backup-dir",
        default=os.path.expanduser(DEFAULT_BACKUP_LOCATION),
        help="Directory for backups and the history ledger",
    )
    parser.add_argument("--max-history", type=int, default=50, help="Backups and history entries to keep")
    sub = parser.add_subparsers(dest="command", required=True)

    p_apply = sub.add_parser("apply", help="Apply the code blocks of a chat reply")
    p_apply.add_argument("file", nargs="?", help="Input file; '-' or omitted reads stdin")
    p_apply.add_argument("--clipboard", action="store_true", help="Read the input from the clipboard")
    p_apply.add_argument("--base", default=".", help="Workspace root (default: current directory)")
    p_apply.add_argument("--save-folder", help="Write relative paths under this workspace folder")
    p_apply.add_argument("-y", "--yes", action="store_true", help="Do not ask before overwriting")
    p_apply.add_argument("--confirm-new", action="store_true", help="Also ask before creating new files")
    p_apply.add_argument("--no-diff", action="store_true", help="Ask without showing a diff")
    p_apply.add_argument("--no-backup", action="store_true", help="Do not back up overwritten files")
    p_apply.add_argument("--dry-run", action="store_true", help="Report what would change without writing")
    p_apply.add_argument("--insert-new", action="store_true", help="Insert new functions next to replaced ones")
    p_apply.add_argument("--open", action="store_true", help="Open written files afterwards")
    p_apply.add_argument("--max-open", type=int, default=5, help="Open at most this many files")
    p_apply.set_defaults(func=_cmd_apply)

    p_blocks = sub.add_parser("blocks", help="List extracted code blocks")
    p_blocks.add_argument("file", nargs="?", help="Input file; '-' or omitted reads stdin")
    p_blocks.add_argument("--clipboard", action="store_true", help="Read the input from the clipboard")
    p_blocks.set_defaults(func=_cmd_blocks)

    p_revert = sub.add_parser("revert", help="Restore the file changed by an earlier apply")
    p_revert.add_argument("--entry", type=int, default=1, help="History entry to restore (1 = latest)")
    p_revert.set_defaults(func=_cmd_revert)

    sub.add_parser("history", help="List recorded changes").set_defaults(func=_cmd_history)
    sub.add_parser("clear-history", help="Forget all recorded changes").set_defaults(func=_cmd_clear_history)
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    try:
        return args.func(args)
    except UsageError as e:
        parser.print_usage(sys.stderr)
        print(f"chatapply: error: {e}", file=sys.stderr)
        return EXIT_USAGE
    except ChatApplyError as e:
        log.debug("Command failed", exc_info=True)
        print(f"chatapply: {e}", file=sys.stderr)
        return EXIT_FAILED


if __name__ == "__main__":
    sys.exit(main())
