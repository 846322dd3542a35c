# chatapply/extract/blocks.py
from __future__ import annotations

import logging
from typing import List, Optional

from ..models.blocks import CodeBlock
from .fences import iter_fenced_regions

log = logging.getLogger(__name__)


def _language_from_info(info: str) -> str:
    parts = info.split()
    if not parts or "=" in parts[0]:
        return ""
    return parts[0].lower()


def _path_candidate(preamble: str) -> Optional[str]:
    """The nearest non-blank line above the opener, trimmed."""
    for line in reversed(preamble.splitlines()):
        if line.strip():
            return line.strip()
    return None


def looks_like_path(candidate: Optional[str]) -> bool:
    """A path hint must contain a separator or a dot to count as a filename."""
    return bool(candidate) and ("/" in candidate or "." in candidate)


def extract_blocks(text: str) -> List[CodeBlock]:
    """
    Extract every fenced code block that has a file path on the line above it.

    Blocks whose hint does not look like a path are dropped; the extractor
    never invents a destination. Bodies are returned verbatim and blocks keep
    their document order, including repeated blocks for the same file.
    """
    blocks: List[CodeBlock] = []
    if not text:
        return blocks

    for region in iter_fenced_regions(text):
        candidate = _path_candidate(region.preamble)
        if not looks_like_path(candidate):
            log.debug("Skipping fenced block at %d: no usable path hint (%r)", region.start, candidate)
            continue
        blocks.append(CodeBlock(
            file_path=candidate,
            language=_language_from_info(region.info),
            code=region.code,
        ))
    return blocks
