# chatapply/extract/fences.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, List, Tuple

from ..models.fence import FenceToken


@dataclass(frozen=True)
class FencedRegion:
    """A top-level fenced region, before any path-hint filtering."""

    info: str
    code: str
    # Text between the end of the previous region and this region's opener line.
    preamble: str
    start: int      # index of the first body char
    end: int        # index AFTER the last body char


# =============================
# Fence tokenization
# =============================

def _line_bounds(text: str, idx: int) -> Tuple[int, int]:
    idx = max(0, min(idx, len(text)))
    ls = text.rfind("\n", 0, idx) + 1
    le_pos = text.find("\n", idx)
    le = le_pos if le_pos != -1 else len(text)
    return ls, le


def _tokenize_fences(text: str) -> List[FenceToken]:
    tokens: List[FenceToken] = []
    i, n = 0, len(text)
    while i < n:
        ch = text[i]
        if ch in ("`", "~"):
            j = i + 1
            while j < n and text[j] == ch:
                j += 1
            run = j - i
            if run >= 3:
                ls, le = _line_bounds(text, i)
                tokens.append(FenceToken(
                    start=i, end=j, char=ch, length=run,
                    info=text[j:le].strip(),
                    line_start=ls, line_end=le,
                    at_line_start=not text[ls:i].strip(),
                ))
                i = j
                continue
        i += 1
    return tokens


def _closes(tok: FenceToken, opener: Tuple[str, int]) -> bool:
    char, length = opener
    return not tok.info and tok.char == char and tok.length >= length


def _body_end(text: str, closer: FenceToken, body_start: int) -> int:
    """Body ends before the newline that precedes a closer standing on its own line."""
    if not closer.at_line_start:
        return max(closer.start, body_start)
    end = closer.line_start
    if end > 0 and text[end - 1] == "\n":
        end -= 1
        if end > 0 and text[end - 1] == "\r":
            end -= 1
    return max(end, body_start)


def iter_fenced_regions(text: str) -> Iterator[FencedRegion]:
    """
    Yield every **top-level** fenced region in document order.

    An opener is a fence at the start of a line; its first info token is the
    language. Inside a region, a line-leading fence with an info string opens a
    nested region and a bare fence of the same character (at least as long)
    closes the innermost one. A fence that never closes ends the scan.
    """
    tokens = _tokenize_fences(text)
    floor = 0
    i, n = 0, len(tokens)
    while i < n:
        opener = tokens[i]
        i += 1
        if not opener.at_line_start or opener.line_end >= len(text):
            # Not an opener, or a fence on the last line with no body after it.
            continue

        body_start = opener.line_end + 1
        stack = [(opener.char, opener.length)]
        closer = None
        while i < n:
            tok = tokens[i]
            i += 1
            if tok.at_line_start and tok.info:
                stack.append((tok.char, tok.length))
            elif _closes(tok, stack[-1]):
                stack.pop()
            if not stack:
                closer = tok
                break

        if closer is None:
            return

        body_end = _body_end(text, closer, body_start)
        yield FencedRegion(
            info=opener.info,
            code=text[body_start:body_end],
            preamble=text[floor:opener.line_start],
            start=body_start,
            end=body_end,
        )
        floor = closer.line_end
