# chatapply/classify.py
"""
Decide whether a code block is a partial update or a whole-file replacement.

Chat replies that hand back "just the function" tend to be short and
import-free, while complete files open with imports followed by a class or
several routines. The decision is an ordered rule table; the first rule whose
predicate holds wins and anything unmatched is a full replacement.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Tuple

from .index import index_functions
from .models.results import UpdateKind

# Import/include-style statement at the very start of the block.
_IMPORTS_AT_START_RE = re.compile(
    r"^\s*(?:"
    r"import\b|"
    r"from\s+\S+\s+import\b|"
    r"(?:const|let|var)\s+.*=\s*require\s*\(|"
    r"require\s*\(|"
    r"#\s*include\b|"
    r"using\s+[\w.]+\s*;|"
    r"use\s+[\w:]+|"
    r"package\s+[\w.]+"
    r")"
)

_TYPE_DEFINITION_RE = re.compile(
    r"(?m)^\s*(?:export\s+)?(?:default\s+)?(?:(?:public|private|abstract|final|sealed|data)\s+)*"
    r"(?:class|interface|struct|enum|trait)\s+\w+"
)

# A block that is nothing but a file extension, e.g. ".js".
_BARE_EXTENSION_RE = re.compile(r"^\s*\.\w+\s*$")

_LEADING_FUNCTION_RE = re.compile(r"^(?:export\s+)?(?:async\s+)?(?:function|def|func|fn)\b")


def has_leading_imports(code: str) -> bool:
    return _IMPORTS_AT_START_RE.match(code) is not None


def defines_type(code: str) -> bool:
    return _TYPE_DEFINITION_RE.search(code) is not None


def is_bare_extension(code: str) -> bool:
    return _BARE_EXTENSION_RE.match(code) is not None


def starts_with_function_keyword(code: str) -> bool:
    return _LEADING_FUNCTION_RE.match(code.strip()) is not None


@dataclass(frozen=True)
class Rule:
    name: str
    predicate: Callable[[str, int], bool]  # (code, span_count) -> matched
    verdict: UpdateKind


def _imports_with_structure(code: str, span_count: int) -> bool:
    return has_leading_imports(code) and (defines_type(code) or span_count > 3)


def _few_functions(code: str, span_count: int) -> bool:
    return 1 <= span_count <= 3 and not has_leading_imports(code) and not is_bare_extension(code)


def _leading_function_keyword(code: str, span_count: int) -> bool:
    return starts_with_function_keyword(code)


CLASSIFICATION_RULES: Tuple[Rule, ...] = (
    Rule("imports-with-structure", _imports_with_structure, UpdateKind.FULL),
    Rule("few-functions", _few_functions, UpdateKind.PARTIAL),
    Rule("leading-function-keyword", _leading_function_keyword, UpdateKind.PARTIAL),
)

DEFAULT_RULE_NAME = "default"
DEFAULT_VERDICT = UpdateKind.FULL


def explain_classification(code: str) -> Tuple[UpdateKind, str]:
    """Return the verdict for `code` and the name of the rule that decided it."""
    span_count = len(index_functions(code))
    for rule in CLASSIFICATION_RULES:
        if rule.predicate(code, span_count):
            return rule.verdict, rule.name
    return DEFAULT_VERDICT, DEFAULT_RULE_NAME


def classify_update(code: str) -> UpdateKind:
    verdict, _rule = explain_classification(code)
    return verdict


def is_partial_update(code: str) -> bool:
    return classify_update(code) is UpdateKind.PARTIAL
