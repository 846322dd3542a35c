# chatapply/plan.py
from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from ._logging import resolve_logger
from .errors import EditRangeError, OverlappingEditsError
from .index import index_functions
from .models.blocks import EditOperation, FunctionSpan

__all__ = [
    "PatchPlan",
    "TIER_NAME_MATCH",
    "TIER_SECTION_MATCH",
    "TIER_WHOLE_DOCUMENT",
    "build_patch_plan",
    "plan_edits",
    "apply_edits",
]

TIER_NAME_MATCH = "name-match"
TIER_SECTION_MATCH = "section-match"
TIER_WHOLE_DOCUMENT = "whole-document"

# Declaration marker followed by a name, e.g. "function foo" or "class Foo".
_DECL_TOKEN_RE = re.compile(
    r"\b(function|class|def|func|fn|interface|struct|enum|trait)\s+([A-Za-z_$][\w$]*)"
)
_BLANK_RE = re.compile(r"^\s*$")
_OPENS_BLOCK_RE = re.compile(r"\{\s*$")
_LONE_CLOSER_RE = re.compile(r"^\s*\}\s*;?\s*$")


@dataclass
class PatchPlan:
    """Edit operations for one document snapshot and the tier that produced them."""

    tier: str
    operations: List[EditOperation] = field(default_factory=list)


# ---------- tier 1: replace spans that share a name ----------

def _overlaps(start: int, end: int, taken: Sequence[Tuple[int, int]]) -> bool:
    return any(start < t_end and t_start < end for t_start, t_end in taken)


def _nested_in_other(span: FunctionSpan, spans: Sequence[FunctionSpan]) -> bool:
    return any(
        other is not span and other.start <= span.start and span.end <= other.end
        for other in spans
    )


_LEADING_WS_RE = re.compile(r"[ \t]*")


def _header_indent(text: str, start: int) -> str:
    """Leading whitespace of the line holding offset `start`."""
    line_start = text.rfind("\n", 0, start) + 1
    return _LEADING_WS_RE.match(text, line_start).group(0)


def _reindent(content: str, old_indent: str, new_indent: str) -> str:
    """
    Move the body lines of `content` from the header indentation it was
    written at (`new_indent`) to the one of the span it replaces. The first
    line is spliced at the old header's offset and is left alone, as are
    lines that do not start with `new_indent`.
    """
    if old_indent == new_indent:
        return content
    lines = content.split("\n")
    for i in range(1, len(lines)):
        line = lines[i]
        if line.strip() and line.startswith(new_indent):
            lines[i] = old_indent + line[len(new_indent):]
    return "\n".join(lines)


def _name_match_operations(
    existing: str,
    new_code: str,
    *,
    insert_new: bool,
    log,
) -> List[EditOperation]:
    old_by_name: Dict[str, FunctionSpan] = {s.name: s for s in index_functions(existing)}
    if not old_by_name:
        return []
    # Document order; an enclosing span sorts before the spans nested in it.
    new_spans = sorted(index_functions(new_code), key=lambda s: (s.start, -s.end))

    replacements: List[EditOperation] = []
    taken: List[Tuple[int, int]] = []
    # (new-only span, the replaced span that precedes it or None)
    unmatched: List[Tuple[FunctionSpan, Optional[FunctionSpan]]] = []
    anchor: Optional[FunctionSpan] = None
    first: Optional[FunctionSpan] = None

    for span in new_spans:
        old = old_by_name.get(span.name)
        if old is None:
            if insert_new and not _nested_in_other(span, new_spans):
                unmatched.append((span, anchor))
            continue
        if _overlaps(old.start, old.end, taken):
            log.debug("Skipping '%s': its range overlaps an earlier replacement", span.name)
            continue
        old_indent = _header_indent(existing, old.start)
        content = _reindent(span.content, old_indent, _header_indent(new_code, span.start))
        replacements.append(EditOperation(old.start, old.end, content))
        taken.append((old.start, old.end))
        anchor = old
        if first is None or old.start < first.start:
            first = old

    if first is None:
        return []

    insertions: List[EditOperation] = []
    for span, at in unmatched:
        new_indent = _header_indent(new_code, span.start)
        if at is None:
            indent = _header_indent(existing, first.start)
            content = _reindent(span.content, indent, new_indent)
            insertions.append(EditOperation(first.start, first.start, content + "\n\n" + indent))
        else:
            indent = _header_indent(existing, at.start)
            content = _reindent(span.content, indent, new_indent)
            insertions.append(EditOperation(at.end, at.end, "\n\n" + indent + content))
        log.debug("Inserting new function '%s'", span.name)

    ops = replacements + insertions
    # Stable: insertions sharing an offset keep their document order.
    ops.sort(key=lambda op: (op.start, op.end))
    return ops


# ---------- tier 2: replace the section around a declaration ----------

def _declaration_patterns(new_code: str) -> List[re.Pattern]:
    patterns: List[re.Pattern] = []
    seen = set()
    for kw, name in _DECL_TOKEN_RE.findall(new_code.strip()):
        if (kw, name) in seen:
            continue
        seen.add((kw, name))
        patterns.append(re.compile(rf"\b{kw}\s+{re.escape(name)}(?![\w$])"))
    return patterns


def _starts_section(line: str) -> bool:
    """Backward boundary: a blank line, a line opening a block, or one closing a block."""
    return bool(_BLANK_RE.match(line) or _OPENS_BLOCK_RE.search(line) or _LONE_CLOSER_RE.match(line))


def _ends_section(line: str) -> bool:
    return bool(_BLANK_RE.match(line) or _LONE_CLOSER_RE.match(line))


def _section_operation(existing: str, new_code: str, *, log) -> List[EditOperation]:
    if not new_code.strip():
        return []
    patterns = _declaration_patterns(new_code)
    if not patterns:
        return []

    lines = existing.split("\n")
    offsets: List[int] = []
    pos = 0
    for line in lines:
        offsets.append(pos)
        pos += len(line) + 1

    for i, line in enumerate(lines):
        if not any(p.search(line) for p in patterns):
            continue

        first = i
        while first > 0 and not _starts_section(lines[first - 1]):
            first -= 1
        last = i
        while last < len(lines) - 1 and not _ends_section(lines[last + 1]):
            last += 1

        # Take the closing brace along when the section left a block open.
        region = lines[first:last + 1]
        depth = sum(ln.count("{") - ln.count("}") for ln in region)
        if depth > 0 and last < len(lines) - 1 and _LONE_CLOSER_RE.match(lines[last + 1]):
            last += 1

        start = offsets[first]
        end = offsets[last] + len(lines[last].rstrip("\r"))
        log.debug("Section match on line %d: replacing lines %d-%d", i + 1, first + 1, last + 1)
        return [EditOperation(start, end, new_code)]
    return []


# ---------- public API ----------

def build_patch_plan(
    existing: str,
    new_code: str,
    *,
    insert_new: bool = False,
    logger: logging.Logger | None = None,
    log: bool = False,
) -> PatchPlan:
    """
    Work out where `new_code` belongs in `existing`.

    Tiers, each tried only when the previous one produced nothing:
      1. name-match: every function of `new_code` that also exists in
         `existing` replaces the existing span exactly. Functions only present
         in `new_code` are dropped unless `insert_new` is set, in which case
         they are inserted after the preceding replaced function.
      2. section-match: find the first existing line that mentions one of the
         declarations of `new_code` ("function foo", "class Foo", ...) and
         replace the blank-line/brace-delimited section around it with all of
         `new_code`.
      3. whole-document: replace everything.

    The returned operations all refer to offsets in `existing`.
    """
    lg = resolve_logger(logger=logger, enabled=log, name=__name__)

    ops = _name_match_operations(existing, new_code, insert_new=insert_new, log=lg)
    if ops:
        lg.debug("Planned %d name-matched edit(s)", len(ops))
        return PatchPlan(TIER_NAME_MATCH, ops)

    ops = _section_operation(existing, new_code, log=lg)
    if ops:
        return PatchPlan(TIER_SECTION_MATCH, ops)

    lg.debug("No function or section match; replacing the whole document")
    return PatchPlan(TIER_WHOLE_DOCUMENT, [EditOperation(0, len(existing), new_code)])


def plan_edits(
    existing: str,
    new_code: str,
    *,
    insert_new: bool = False,
    logger: logging.Logger | None = None,
    log: bool = False,
) -> List[EditOperation]:
    """Ordered, non-empty list of edits that splice `new_code` into `existing`."""
    return build_patch_plan(existing, new_code, insert_new=insert_new, logger=logger, log=log).operations


def apply_edits(text: str, operations: Sequence[EditOperation]) -> str:
    """
    Apply `operations` to one snapshot of `text` and return the result.

    Offsets always refer to the original `text`, never to intermediate
    results. Raises EditRangeError for offsets outside the text and
    OverlappingEditsError when two operations touch the same characters.
    """
    n = len(text)
    for op in operations:
        if not (0 <= op.start <= op.end <= n):
            raise EditRangeError(f"Edit range {op.start}:{op.end} is outside of the text (length {n})")

    ordered = sorted(operations, key=lambda op: (op.start, op.end))
    out: List[str] = []
    cursor = 0
    for op in ordered:
        if op.start < cursor:
            raise OverlappingEditsError(
                f"Edit range {op.start}:{op.end} overlaps a previous edit ending at {cursor}"
            )
        out.append(text[cursor:op.start])
        out.append(op.replacement)
        cursor = op.end
    out.append(text[cursor:])
    return "".join(out)
