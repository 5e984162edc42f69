from __future__ import annotations

from collections.abc import Sequence


class LayoutError(Exception):
    """Base error for the diagram layout pipeline."""


class InvalidDiagramError(LayoutError):
    def __init__(self, message: str, problems: Sequence[str] = ()) -> None:
        self.problems = list(problems)
        if self.problems:
            message = f"{message}: {'; '.join(self.problems)}"
        super().__init__(message)


class UnsupportedDiagramKindError(LayoutError):
    def __init__(self, kind: object) -> None:
        self.kind = kind
        super().__init__(f"No layout strategy registered for diagram kind: {kind}")


class DiagramParseError(LayoutError):
    pass
