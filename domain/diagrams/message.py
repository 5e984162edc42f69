from __future__ import annotations

from typing import Literal

from domain.diagrams.base import DiagramBase


class ErrorDiagram(DiagramBase):
    """A placeholder diagram that only reports a failure, such as a source that did not parse."""

    kind: Literal["error"] = "error"
    message: str | None = None


class InfoDiagram(DiagramBase):
    kind: Literal["info"] = "info"
    show_info: bool = False
