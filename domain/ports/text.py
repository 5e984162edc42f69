from __future__ import annotations

from typing import Protocol

from domain.models import Size


class TextMeasurer(Protocol):
    def measure(
        self,
        text: str,
        font_size: float,
        width: float | None = None,
        height: float | None = None,
    ) -> Size: ...
