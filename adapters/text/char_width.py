from __future__ import annotations

from dataclasses import dataclass

from domain.models import Size
from domain.ports.text import TextMeasurer


@dataclass(frozen=True)
class CharWidthTextMeasurer(TextMeasurer):
    """Estimates label size from character count; no font metrics involved."""

    char_width_ratio: float = 0.5
    line_height_ratio: float = 1.0

    def measure(
        self,
        text: str,
        font_size: float,
        width: float | None = None,
        height: float | None = None,
    ) -> Size:
        lines = text.splitlines() or [""]
        longest = max(len(line) for line in lines)
        measured_width = longest * self.char_width_ratio * font_size
        measured_height = len(lines) * self.line_height_ratio * font_size
        return Size(
            width if width is not None else measured_width,
            height if height is not None else measured_height,
        )
