# chatapply/utils/gitignore.py
import logging
import os
from typing import List

import pathspec

log = logging.getLogger(__name__)

# Never searched for target files, with or without a .gitignore.
DEFAULT_IGNORES: List[str] = [".git/", "node_modules/"]


def load_ignore_spec(path: str) -> pathspec.PathSpec:
    """
    Return a PathSpec built from DEFAULT_IGNORES plus the nearest .gitignore
    found by walking upward from `path` (file or directory). An unreadable or
    malformed .gitignore leaves only the defaults in effect.
    """
    lines: List[str] = list(DEFAULT_IGNORES)

    base = os.path.abspath(path or ".")
    if os.path.isfile(base):
        base = os.path.dirname(base)

    cur = base
    while True:
        gi = os.path.join(cur, ".gitignore")
        if os.path.exists(gi):
            try:
                with open(gi, "r", encoding="utf-8", errors="ignore") as f:
                    lines.extend(f.read().splitlines())
            except OSError as e:
                log.debug("Could not read %s: %s", gi, e)
            break
        parent = os.path.dirname(cur)
        if parent == cur:
            break
        cur = parent

    try:
        return pathspec.PathSpec.from_lines("gitwildmatch", lines)
    except Exception as e:
        log.warning("Ignoring malformed .gitignore patterns: %s", e)
        return pathspec.PathSpec.from_lines("gitwildmatch", DEFAULT_IGNORES)
