# chatapply/index/__init__.py
from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from ..models.blocks import FunctionSpan
from .recognizers import (
    AssignedCallableRecognizer,
    CallShapedBodyRecognizer,
    DeclarationRecognizer,
    IndentationBlockRecognizer,
    SpanRecognizer,
    default_recognizers,
)

log = logging.getLogger(__name__)

_DEFAULT_RECOGNIZERS = default_recognizers()


def index_functions(
    source: str,
    recognizers: Optional[Iterable[SpanRecognizer]] = None,
) -> List[FunctionSpan]:
    """
    Return the named callable spans of `source`.

    Recognisers run in priority order and each reports all of its matches.
    A name that was already reported, by an earlier recogniser or earlier in
    the same pass, is dropped: looser patterns come later and are more prone
    to false positives. The result depends only on `source`.
    """
    if not source:
        return []

    spans: List[FunctionSpan] = []
    seen = set()
    for recognizer in recognizers if recognizers is not None else _DEFAULT_RECOGNIZERS:
        for span in recognizer.find_spans(source):
            if span.name in seen:
                continue
            seen.add(span.name)
            spans.append(span)
        log.debug("%s pass: %d span(s) indexed so far", recognizer.name, len(spans))
    return spans


__all__ = [
    "index_functions",
    "default_recognizers",
    "SpanRecognizer",
    "DeclarationRecognizer",
    "AssignedCallableRecognizer",
    "CallShapedBodyRecognizer",
    "IndentationBlockRecognizer",
]
