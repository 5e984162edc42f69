from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Any, Protocol

from domain.diagram_model import DiagramModel
from domain.models import LayoutResult


class DiagramParser(Protocol):
    def parse(self, source: str | bytes) -> DiagramModel: ...


class LayoutRenderer(Protocol):
    def render(self, result: LayoutResult) -> Any: ...


class DiagramRepository(Protocol):
    def load_all_with_paths(self, directory: Path) -> Sequence[tuple[Path, DiagramModel]]: ...

    def load_by_path(self, path: Path) -> DiagramModel: ...

    def iter_paths(self, directory: Path) -> Sequence[Path]: ...


class LayoutRepository(Protocol):
    def save(self, result: LayoutResult, path: Path) -> None: ...

    def load(self, path: Path) -> dict[str, Any]: ...
