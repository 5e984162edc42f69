from __future__ import annotations

from pathlib import Path
from typing import Any

from adapters.filesystem.diagram_repository import LAYOUT_SUFFIX
from adapters.filesystem.json_utils import load_json, write_json_atomic
from adapters.render.json_renderer import JsonLayoutRenderer
from domain.models import LayoutResult
from domain.ports.repositories import LayoutRenderer, LayoutRepository


def layout_path_for(source: Path, output_dir: Path) -> Path:
    return output_dir / f"{source.stem}{LAYOUT_SUFFIX}"


class FileSystemLayoutRepository(LayoutRepository):
    def __init__(self, renderer: LayoutRenderer | None = None) -> None:
        self.renderer = renderer or JsonLayoutRenderer()

    def save(self, result: LayoutResult, path: Path) -> None:
        write_json_atomic(path, self.renderer.render(result))

    def load(self, path: Path) -> dict[str, Any]:
        return load_json(path)
