"""Shared utilities for embedkit."""

from utils.env_utils import (
    env_required,
    parse_yes_no,
    split_words,
)

__all__ = [
    "env_required",
    "parse_yes_no",
    "split_words",
]
