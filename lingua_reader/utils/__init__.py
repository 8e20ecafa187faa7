"""Utility functions for Lingua Reader."""

from .text_utils import (
    clean_subtitle_text,
    normalize_term,
    parse_substitutions,
    split_paragraphs,
)

__all__ = [
    "clean_subtitle_text",
    "normalize_term",
    "parse_substitutions",
    "split_paragraphs",
]
