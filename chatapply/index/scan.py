# chatapply/index/scan.py
"""
Delimiter matching that is aware of string literals and comments.

This is deliberately shallow: quotes end at the matching quote or at the end
of the line (template/backtick strings may span lines), and comments are
either C-style (`//`, `/* */`) or hash-style (`#`). Regex literals and
language-specific escapes are not understood. Python triple-quoted strings
are tracked line by line with `triple_quote_state`.
"""
from __future__ import annotations

from typing import Optional

_PAIRS = {"(": ")", "{": "}", "[": "]"}


def _skip_string(text: str, i: int) -> int:
    """Return the index just past the string literal starting at `i`."""
    q = text[i]
    n = len(text)
    j = i + 1
    while j < n:
        ch = text[j]
        if ch == "\\":
            j += 2
            continue
        if ch == q:
            return j + 1
        if ch == "\n" and q != "`":
            return j
        j += 1
    return n


def find_closing(text: str, open_idx: int, *, comments: str = "c") -> int:
    """
    Given `text[open_idx]` is one of ( { [, return the index of its balanced
    closing delimiter, or -1 when the text ends first.

    `comments` selects the comment syntax to skip: "c" or "hash".
    """
    open_ch = text[open_idx]
    close_ch = _PAIRS[open_ch]
    depth = 0
    i, n = open_idx, len(text)
    while i < n:
        ch = text[i]
        if ch in ("'", '"', "`"):
            i = _skip_string(text, i)
            continue
        if comments == "c" and ch == "/" and i + 1 < n:
            nxt = text[i + 1]
            if nxt == "/":
                nl = text.find("\n", i)
                i = n if nl == -1 else nl
                continue
            if nxt == "*":
                close = text.find("*/", i + 2)
                i = n if close == -1 else close + 2
                continue
        if comments == "hash" and ch == "#":
            nl = text.find("\n", i)
            i = n if nl == -1 else nl
            continue
        if ch == open_ch:
            depth += 1
        elif ch == close_ch:
            depth -= 1
            if depth == 0:
                return i
        i += 1
    return -1


def line_end(text: str, idx: int) -> int:
    """Index of the newline ending the line that contains `idx` (or len(text))."""
    nl = text.find("\n", idx)
    return len(text) if nl == -1 else nl


def indent_width(line: str) -> int:
    """Leading whitespace width; tabs count as 4."""
    width = 0
    for ch in line:
        if ch == " ":
            width += 1
        elif ch == "\t":
            width += 4
        else:
            break
    return width


def triple_quote_state(line: str, open_quote: Optional[str] = None) -> Optional[str]:
    """
    Scan one line of hash-commented source and return the triple quote
    delimiter still open at its end. `open_quote` is the one open
    at the start of the line.
    """
    i, n = 0, len(line)
    while i < n:
        ch = line[i]
        if open_quote:
            if ch == "\\":
                i += 2
                continue
            if line.startswith(open_quote, i):
                open_quote = None
                i += 3
                continue
            i += 1
            continue
        if ch == "#":
            break
        if line.startswith('"""', i) or line.startswith("'''", i):
            open_quote = line[i:i + 3]
            i += 3
            continue
        if ch in ("'", '"'):
            i = _skip_string(line, i)
            continue
        i += 1
    return open_quote
