"""Formatting, logging and image helpers."""

from .matformat import format_to_matlab, format_to_screen  # noqa: F401
