"""Mask compilation, query building and message matching."""

from .mask import (
    MaskPattern,
    compile_extra_field_mask,
    compile_order_id_mask,
    compile_status_pattern,
)
from .matcher import MessageMatcher
from .query import build_query

__all__ = [
    "MaskPattern",
    "MessageMatcher",
    "build_query",
    "compile_extra_field_mask",
    "compile_order_id_mask",
    "compile_status_pattern",
]
