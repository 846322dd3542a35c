# chatapply/utils/__init__.py
from .diff import unified_diff
from .fs import find_files_named, resolve_filename
from .gitignore import load_ignore_spec

__all__ = [
    "unified_diff",
    "find_files_named",
    "resolve_filename",
    "load_ignore_spec",
]
