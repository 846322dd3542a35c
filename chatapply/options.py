# chatapply/options.py
from dataclasses import dataclass

DEFAULT_BACKUP_LOCATION = "~/.chat-code-apply/backup"
HISTORY_FILENAME = "history.json"


@dataclass
class ApplyOptions:
    """Settings for one CodeApplier session."""

    # Workspace root; only used by entry points that build their own LocalWorkspace.
    base_path: str = "."
    # Subfolder of the workspace that relative paths are written under.
    default_save_folder: str = ""
    # Show a unified diff in the confirmation prompt instead of a plain "Overwrite?".
    enable_diff_preview: bool = True
    # Also ask before creating files that do not exist yet.
    confirm_new_files: bool = False
    enable_backups: bool = True
    backup_location: str = DEFAULT_BACKUP_LOCATION
    max_history_items: int = 50
    max_files_to_open: int = 5
    dry_run: bool = False
    # Insert functions that only exist in the new code next to the replaced ones.
    insert_new_functions: bool = False
