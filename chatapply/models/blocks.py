from dataclasses import dataclass


@dataclass(frozen=True)
class CodeBlock:
    """One fenced excerpt plus its destination path and language tag."""

    file_path: str
    language: str
    code: str


@dataclass(frozen=True)
class FunctionSpan:
    """A named region of source text recognised as a callable unit."""

    name: str
    content: str
    start: int
    end: int

    def __post_init__(self) -> None:
        if self.end - self.start != len(self.content):
            raise ValueError(
                f"span '{self.name}' length mismatch: {self.end} - {self.start} != {len(self.content)}"
            )


@dataclass(frozen=True)
class EditOperation:
    """Replace text[start:end] of one immutable snapshot with `replacement`."""

    start: int
    end: int
    replacement: str
