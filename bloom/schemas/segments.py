"""
Rich text segments for Bloom lesson content.

Blocks and quiz options carry lists of styled runs instead of markup, so
styling survives structurally. Only the data shape and plain-text helpers
live here; layout belongs to the UI.
"""

from collections.abc import Iterable
from typing import Optional

from .base import WireModel

# Semantic color tokens the UI maps to theme colors
SEGMENT_COLORS = ("accent", "secondary", "success", "warning", "blue", "purple")


class TextSegment(WireModel):
    """One run of text with optional inline styling."""
    text: str
    bold: Optional[bool] = None
    italic: Optional[bool] = None
    underline: Optional[bool] = None
    color: Optional[str] = None       # one of SEGMENT_COLORS
    definition: Optional[str] = None  # tappable definition popover
    latex: Optional[bool] = None      # render the run as inline math

    @property
    def is_math(self) -> bool:
        return bool(self.latex)

    @property
    def has_definition(self) -> bool:
        return bool(self.definition)


def flatten(segments: Optional[Iterable[TextSegment]], separator: str = "") -> str:
    """
    Join segment texts into plain text (accessibility labels, search).

    Styling is dropped; math runs keep their LaTeX source.
    """
    if not segments:
        return ""
    return separator.join(segment.text for segment in segments)


def segments_or_text(segments: Optional[list[TextSegment]], fallback: Optional[str]) -> list[TextSegment]:
    """
    Return the rich form if present, else a single unstyled segment built
    from the plain fallback string (empty list when both are missing).
    """
    if segments:
        return segments
    if fallback:
        return [TextSegment(text=fallback)]
    return []
