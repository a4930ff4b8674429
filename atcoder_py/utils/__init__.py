"""Utility functions."""

from .terminal import format_result_color, pad_markup

__all__ = ["format_result_color", "pad_markup"]
