"""Shared service helpers."""

from .pagination import iter_token_pages

__all__ = ["iter_token_pages"]
