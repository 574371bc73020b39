"""Typographic formatting rules and the design-system style table."""

from .formatter import format_content, formatted_style_key
from .typography import TYPOGRAPHY, TypographyStyle, find_style

__all__ = [
    "TYPOGRAPHY",
    "TypographyStyle",
    "find_style",
    "format_content",
    "formatted_style_key",
]
