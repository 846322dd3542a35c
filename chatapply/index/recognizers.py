# chatapply/index/recognizers.py
from __future__ import annotations

import re
from typing import List, Tuple

from ..models.blocks import FunctionSpan
from .scan import find_closing, indent_width, line_end, triple_quote_state

_IDENT = r"[A-Za-z_$][\w$]*"

# Words that look like `name(...) {` but open control flow, not a callable.
CONTROL_KEYWORDS = frozenset({
    "if", "else", "elif", "for", "foreach", "while", "do", "switch", "case",
    "catch", "try", "finally", "return", "throw", "new", "delete", "typeof",
    "sizeof", "await", "yield", "with", "function", "func", "fn", "fun", "def",
    "lock", "using", "synchronized", "match", "when", "until", "unless", "super",
    "this", "in", "of", "and", "or", "not", "assert", "import", "export", "from",
})

# After a closing paren: optional return type / throws clause, then the body brace.
# A parenthesised group is allowed for multi-value returns: `func f() (int, error) {`
_BODY_OPEN_RE = re.compile(r"(?:[^{};=()\n]|\([^(){};\n]*\))*\s*\{")
_ARROW_RE = re.compile(r"\s*(?::[^=;{}\n]+)?=>\s*")


class SpanRecognizer:
    """One surface syntax for named callables."""

    name = "base"

    def find_spans(self, text: str) -> List[FunctionSpan]:
        raise NotImplementedError


def _brace_body_end(text: str, close_paren: int) -> int:
    """Exclusive end of a `{...}` body that follows a parameter list, or -1."""
    m = _BODY_OPEN_RE.match(text, close_paren + 1)
    if not m:
        return -1
    close_brace = find_closing(text, m.end() - 1)
    return -1 if close_brace == -1 else close_brace + 1


def _span(text: str, name: str, start: int, end: int) -> FunctionSpan:
    return FunctionSpan(name=name, content=text[start:end], start=start, end=end)


class DeclarationRecognizer(SpanRecognizer):
    """`function name(...) {...}` and the same shape under func/fn/fun keywords."""

    name = "declaration"
    HEADER = re.compile(
        r"(?:\basync\s+)?\b(?:function(?:\s*\*\s*|\s+)|(?:func|fn|fun)\s+(?:\([^()\n]*\)\s*)?)"
        rf"(?P<name>{_IDENT})\s*(?:<[^<>\n]*>\s*)?\("
    )

    def find_spans(self, text: str) -> List[FunctionSpan]:
        spans: List[FunctionSpan] = []
        pos = 0
        while True:
            m = self.HEADER.search(text, pos)
            if not m:
                break
            close_paren = find_closing(text, m.end() - 1)
            end = _brace_body_end(text, close_paren) if close_paren != -1 else -1
            if end == -1:
                pos = m.end()
                continue
            spans.append(_span(text, m.group("name"), m.start(), end))
            pos = end
        return spans


class AssignedCallableRecognizer(SpanRecognizer):
    """
    Callables bound to a name: `const name = (...) => {...}`,
    `let name = function (...) {...}`, class-field arrows and Python
    `name = lambda ...: ...` bindings.
    """

    name = "assigned"
    HEADER = re.compile(
        rf"(?m)(?:\b(?P<kw>const|let|var)\s+|^[ \t]*(?:(?:static|public|private|protected|readonly)\s+)*)"
        rf"(?P<name>{_IDENT})\s*(?::[^=\n]+?)?=\s*(?:async\s+)?"
    )
    FUNCTION_KW = re.compile(rf"function\b\s*\*?\s*(?:{_IDENT})?\s*\(")
    SINGLE_PARAM = re.compile(rf"{_IDENT}\s*=>\s*")
    LAMBDA = re.compile(r"lambda\b[^:\n]*:[ \t]*")

    def _expression_end(self, text: str, body: int) -> int:
        end = line_end(text, body)
        expr = text[body:end].rstrip()
        return body + len(expr) if expr else -1

    def _callable_end(self, text: str, pos: int) -> int:
        lam = self.LAMBDA.match(text, pos)
        if lam:
            return self._expression_end(text, lam.end())

        m = self.FUNCTION_KW.match(text, pos)
        if m:
            close_paren = find_closing(text, m.end() - 1)
            return _brace_body_end(text, close_paren) if close_paren != -1 else -1

        if pos < len(text) and text[pos] == "(":
            close_paren = find_closing(text, pos)
            if close_paren == -1:
                return -1
            arrow = _ARROW_RE.match(text, close_paren + 1)
        else:
            arrow = self.SINGLE_PARAM.match(text, pos)
        if not arrow:
            return -1

        body = arrow.end()
        if body < len(text) and text[body] == "{":
            close_brace = find_closing(text, body)
            return -1 if close_brace == -1 else close_brace + 1
        # Expression body: the rest of the line.
        return self._expression_end(text, body)

    def find_spans(self, text: str) -> List[FunctionSpan]:
        spans: List[FunctionSpan] = []
        pos = 0
        while True:
            m = self.HEADER.search(text, pos)
            if not m:
                break
            end = self._callable_end(text, m.end())
            if end == -1:
                pos = m.end()
                continue
            start = m.start("kw") if m.group("kw") else m.start("name")
            spans.append(_span(text, m.group("name"), start, end))
            pos = end
        return spans


class CallShapedBodyRecognizer(SpanRecognizer):
    """Method-shaped `name(...) {...}` as found in class bodies and object literals."""

    name = "call-shaped"
    HEADER = re.compile(rf"(?:\basync\s+)?(?<![\w$.])(?P<name>{_IDENT})\s*\(")

    def find_spans(self, text: str) -> List[FunctionSpan]:
        spans: List[FunctionSpan] = []
        pos = 0
        while True:
            m = self.HEADER.search(text, pos)
            if not m:
                break
            name = m.group("name")
            if name in CONTROL_KEYWORDS:
                pos = m.end()
                continue
            close_paren = find_closing(text, m.end() - 1)
            end = _brace_body_end(text, close_paren) if close_paren != -1 else -1
            if end == -1:
                pos = m.end()
                continue
            spans.append(_span(text, name, m.start(), end))
            pos = end
        return spans


class IndentationBlockRecognizer(SpanRecognizer):
    """`def name(...):` followed by its indented body."""

    name = "indentation"
    HEADER = re.compile(r"(?m)^(?P<indent>[ \t]*)(?P<head>(?:async[ \t]+)?def[ \t]+(?P<name>[A-Za-z_]\w*)[ \t]*\()")
    COLON = re.compile(r"[ \t]*(?:->[^:\n]+)?:")

    def _block_end(self, text: str, header_indent: int, colon_end: int) -> int:
        first_eol = line_end(text, colon_end)
        rest = text[colon_end:first_eol]
        if rest.strip():
            # One-line body: `def f(): return 1`
            return colon_end + len(rest.rstrip())

        end = first_eol
        pos = first_eol + 1
        open_quote = None
        while pos < len(text):
            eol = line_end(text, pos)
            line = text[pos:eol]
            if line.strip():
                # Lines inside a triple-quoted string never end the block.
                if open_quote is None and indent_width(line) <= header_indent:
                    break
                end = pos + len(line.rstrip())
            open_quote = triple_quote_state(line, open_quote)
            pos = eol + 1
        return end

    def find_spans(self, text: str) -> List[FunctionSpan]:
        spans: List[FunctionSpan] = []
        pos = 0
        while True:
            m = self.HEADER.search(text, pos)
            if not m:
                break
            close_paren = find_closing(text, m.end() - 1, comments="hash")
            colon = self.COLON.match(text, close_paren + 1) if close_paren != -1 else None
            if not colon:
                pos = m.end()
                continue
            end = self._block_end(text, indent_width(m.group("indent")), colon.end())
            spans.append(_span(text, m.group("name"), m.start("head"), end))
            pos = max(end, m.end())
        return spans


def default_recognizers() -> Tuple[SpanRecognizer, ...]:
    """Recognisers in priority order: stricter shapes first."""
    return (
        DeclarationRecognizer(),
        AssignedCallableRecognizer(),
        CallShapedBodyRecognizer(),
        IndentationBlockRecognizer(),
    )
