# chatapply/utils/fs.py
import os
from typing import List, Optional, Tuple

import pathspec


def find_files_named(root_dir: str, file_name: str, spec: Optional[pathspec.PathSpec] = None) -> List[str]:
    """
    Walk `root_dir` and return every file called `file_name`, as sorted
    root-relative POSIX paths. Directories and files matched by `spec` are
    not searched.
    """
    found: List[str] = []
    for root, dirs, files in os.walk(root_dir):
        rel_root = os.path.relpath(root, root_dir).replace(os.sep, "/")
        rel_root = "" if rel_root == "." else rel_root + "/"
        if spec is not None:
            # Trailing '/' so directory patterns like 'build/' match.
            dirs[:] = [d for d in dirs if not spec.match_file(f"{rel_root}{d}/")]
        else:
            dirs[:] = [d for d in dirs if d != ".git"]
        dirs.sort()
        if file_name in files:
            rel_path = f"{rel_root}{file_name}"
            if spec is None or not spec.match_file(rel_path):
                found.append(rel_path)
    return sorted(found)


def resolve_filename(file_path: str, workspace) -> Tuple[str, List[str]]:
    """
    Resolve a bare filename against a workspace.

    Paths with separators are returned unchanged. A bare filename that exists
    at the workspace root is kept; otherwise the workspace is searched and a
    unique match replaces it. Ambiguous or missing names are returned as given.

    Returns:
        Tuple[str, List[str]]: (resolved_path, log_messages)
    """
    logs: List[str] = []
    if not file_path or os.path.isabs(file_path) or "/" in file_path or "\\" in file_path:
        return file_path, logs

    if workspace.file_exists(file_path):
        return file_path, logs

    logs.append(f"  - File '{file_path}' not found at root. Searching workspace...")
    matches = workspace.find_by_name(file_path)
    if len(matches) == 1:
        logs.append(f"  - Found unique match: '{matches[0]}'. Updating path.")
        return matches[0], logs
    if len(matches) > 1:
        logs.append(
            f"  - WARNING: Found multiple files for '{file_path}': {matches}. Using original path due to ambiguity."
        )
    return file_path, logs
