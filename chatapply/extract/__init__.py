from .blocks import extract_blocks, looks_like_path
from .fences import FencedRegion, iter_fenced_regions

__all__ = [
    "extract_blocks",
    "looks_like_path",
    "iter_fenced_regions",
    "FencedRegion",
]
