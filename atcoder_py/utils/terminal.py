"""Utility functions for terminal output."""

from typing import Optional

from rich.markup import escape
from rich.text import Text

from ..client.models import ResultCode


def format_result_color(code: ResultCode, text: Optional[str] = None) -> str:
    """Wrap a result label in colour markup: green when accepted, red otherwise."""
    if text is None:
        text = code.short_label
    color = "green" if code.accepted else "red"
    return f"[{color}]{escape(text)}[/{color}]"


def pad_markup(markup: str, width: int) -> str:
    """Right-pad markup so that its visible text is at least `width` cells."""
    visible = Text.from_markup(markup).cell_len
    return markup + " " * max(0, width - visible)
