# chatapply/utils/diff.py
import difflib


def unified_diff(original: str, updated: str, path: str, *, context: int = 3) -> str:
    """Unified diff of two versions of `path`, as shown in confirmation prompts."""
    lines = difflib.unified_diff(
        original.splitlines(keepends=True),
        updated.splitlines(keepends=True),
        fromfile=f"a/{path}",
        tofile=f"b/{path}",
        n=context,
    )
    out = []
    for line in lines:
        out.append(line if line.endswith("\n") else line + "\n\\ No newline at end of file\n")
    return "".join(out)
