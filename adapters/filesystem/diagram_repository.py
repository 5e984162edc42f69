from __future__ import annotations

from pathlib import Path
from typing import Iterable, List

from adapters.parsing.json_parser import JsonDiagramParser
from domain.diagram_model import DiagramModel
from domain.ports.repositories import DiagramParser, DiagramRepository

LAYOUT_SUFFIX = ".layout.json"


class FileSystemDiagramRepository(DiagramRepository):
    """Diagram models stored as (optionally ``//``-commented) JSON files in a directory."""

    def __init__(self, parser: DiagramParser | None = None) -> None:
        self.parser = parser or JsonDiagramParser()

    def load_all(self, directory: Path) -> List[DiagramModel]:
        return [model for _, model in self.load_all_with_paths(directory)]

    def load_all_with_paths(self, directory: Path) -> List[tuple[Path, DiagramModel]]:
        return [(path, self.load_by_path(path)) for path in self.iter_paths(directory)]

    def load_by_path(self, path: Path) -> DiagramModel:
        return self.parser.parse(path.read_bytes())

    def iter_paths(self, directory: Path) -> List[Path]:
        return sorted(self._iter_paths(directory))

    def _iter_paths(self, directory: Path) -> Iterable[Path]:
        for path in directory.glob("*.json"):
            if path.name.endswith(LAYOUT_SUFFIX):
                continue
            yield path
