# chatapply/collaborators/workspace.py
import os
from typing import List

from ..errors import PathViolation
from ..utils.fs import find_files_named
from ..utils.gitignore import load_ignore_spec


class Workspace:
    """
    File-system collaborator used by CodeApplier.

    Paths are either absolute or relative to the workspace root, always with
    forward slashes.
    """

    def file_exists(self, path: str) -> bool:
        raise NotImplementedError

    def read_file(self, path: str) -> str:
        """Return the file's text; raises FileNotFoundError when it is missing."""
        raise NotImplementedError

    def write_file(self, path: str, content: str) -> None:
        """Replace the file's content; raises OSError on failure."""
        raise NotImplementedError

    def create_directory(self, path: str) -> None:
        """Create `path` and its parents if needed; raises OSError on failure."""
        raise NotImplementedError

    def find_by_name(self, file_name: str) -> List[str]:
        """Relative paths of files called `file_name`; used to resolve bare filenames."""
        return []

    def absolute_path(self, path: str) -> str:
        return path


class LocalWorkspace(Workspace):
    """Workspace backed by a directory on the local disk."""

    def __init__(self, base_path: str, *, allow_outside: bool = False):
        self.base_path = os.path.realpath(base_path)
        self.allow_outside = allow_outside

    def absolute_path(self, path: str) -> str:
        """
        Join and normalize a workspace path while enforcing containment.
        Raises PathViolation if the result escapes the workspace root, unless
        allow_outside is set.
        """
        if os.path.isabs(path):
            resolved = os.path.abspath(path)
        else:
            resolved = os.path.abspath(os.path.join(self.base_path, *path.split("/")))
        if not self.allow_outside and os.path.commonpath([self.base_path, resolved]) != self.base_path:
            raise PathViolation(f"Path '{path}' resolves outside of the workspace '{self.base_path}'")
        return resolved

    def file_exists(self, path: str) -> bool:
        return os.path.isfile(self.absolute_path(path))

    def read_file(self, path: str) -> str:
        with open(self.absolute_path(path), "r", encoding="utf-8") as f:
            return f.read()

    def write_file(self, path: str, content: str) -> None:
        with open(self.absolute_path(path), "w", encoding="utf-8") as f:
            f.write(content)

    def create_directory(self, path: str) -> None:
        os.makedirs(self.absolute_path(path), exist_ok=True)

    def find_by_name(self, file_name: str) -> List[str]:
        return find_files_named(self.base_path, file_name, load_ignore_spec(self.base_path))
