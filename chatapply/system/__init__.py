"""
Convenience system helpers for the command line front end.

Public API:
  - read_clipboard() -> str
  - open_in_viewer(path: str) -> bool
"""
from __future__ import annotations

import logging
import os
import subprocess
import sys

__all__ = ["read_clipboard", "open_in_viewer"]

log = logging.getLogger(__name__)


def _run_capture(cmd: list[str]) -> str | None:
    proc = subprocess.run(cmd, capture_output=True, check=False)
    if proc.returncode != 0:
        return None
    return proc.stdout.decode("utf-8", errors="replace")


def read_clipboard() -> str:
    """
    Read the system clipboard as text using best-effort, cross-platform fallbacks.
    Returns "" when no clipboard tool is available or every tool fails.
    """
    candidates: list[list[str]] = []
    # macOS
    if _which("pbpaste"):
        candidates.append(["pbpaste"])
    # Windows
    if _which("powershell"):
        candidates.append(["powershell", "-NoProfile", "-Command", "Get-Clipboard -Raw"])
    # Linux/BSD: try Wayland then X11
    if _which("wl-paste"):
        candidates.append(["wl-paste", "--no-newline"])
    if _which("xclip"):
        candidates.append(["xclip", "-selection", "clipboard", "-o"])
    if _which("xsel"):
        candidates.append(["xsel", "--clipboard", "--output"])

    for cmd in candidates:
        try:
            out = _run_capture(cmd)
        except OSError as e:
            log.debug("Clipboard tool %s failed: %s", cmd[0], e)
            continue
        if out is not None:
            # PowerShell terminates its output with CRLF
            return out.replace("\r\n", "\n")
    return ""


def open_in_viewer(path: str) -> bool:
    """
    Open `path` with the platform's default application.
    Returns True when a launcher was started, False otherwise.
    """
    try:
        if sys.platform == "darwin":
            subprocess.Popen(["open", path])
            return True
        if os.name == "nt":
            os.startfile(path)  # type: ignore[attr-defined]
            return True
        if _which("xdg-open"):
            subprocess.Popen(["xdg-open", path], stdout=subprocess.DEVNULL, stderr=subprocess.DEVNULL)
            return True
    except OSError as e:
        log.warning("Failed to open %s: %s", path, e)
    return False


def _which(cmd: str) -> bool:
    """Minimal shutil.which to avoid import overhead."""
    paths = os.environ.get("PATH", "").split(os.pathsep)
    exts = [""]
    if os.name == "nt":
        pathext = os.environ.get("PATHEXT", ".EXE;.BAT;.CMD").split(";")
        exts = [e.lower() for e in pathext if e]
    for folder in paths:
        full = os.path.join(folder, cmd)
        if os.path.isfile(full) and os.access(full, os.X_OK):
            return True
        # Windows: try with PATHEXT
        for e in exts:
            full_ext = full + e
            if os.path.isfile(full_ext) and os.access(full_ext, os.X_OK):
                return True
    return False
