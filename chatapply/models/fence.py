from dataclasses import dataclass


@dataclass(frozen=True)
class FenceToken:
    """A run of 3+ backticks or 3+ tildes anywhere in a line."""
    start: int            # absolute index of first fence char
    end: int              # absolute index AFTER last fence char
    char: str             # '`' or '~'
    length: int           # run length (>=3)
    info: str             # stripped text on the same line after the fence
    line_start: int       # abs index of start of the fence's line
    line_end: int         # abs index of '\n' ending the fence's line (or len(text))
    at_line_start: bool   # only whitespace precedes the fence on its line
