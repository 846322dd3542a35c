# conftest.py - shared fixtures
import posixpath

import pytest

from chatapply.collaborators import Workspace


class MemoryWorkspace(Workspace):
    """Workspace kept in a dict; paths in `fail_writes` or `fail_dirs` raise OSError."""

    def __init__(self, files=None):
        self.files = dict(files or {})
        self.dirs = []
        self.fail_writes = set()
        self.fail_dirs = set()

    def file_exists(self, path):
        return path in self.files

    def read_file(self, path):
        if path not in self.files:
            raise FileNotFoundError(path)
        return self.files[path]

    def write_file(self, path, content):
        if path in self.fail_writes:
            raise OSError("disk full")
        self.files[path] = content

    def create_directory(self, path):
        if path in self.fail_dirs:
            raise OSError("read-only")
        self.dirs.append(path)

    def find_by_name(self, file_name):
        return sorted(p for p in self.files if posixpath.basename(p) == file_name)

    def absolute_path(self, path):
        return "/ws/" + path


@pytest.fixture
def mem_ws():
    return MemoryWorkspace()
