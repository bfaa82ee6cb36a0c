"""Mark scheme point extraction."""

from .extractor import extract_mark_points, split_inline_bullets

__all__ = ["extract_mark_points", "split_inline_bullets"]
