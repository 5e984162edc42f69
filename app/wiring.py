from __future__ import annotations

import importlib.util
import logging

from adapters.filesystem.diagram_repository import FileSystemDiagramRepository
from adapters.filesystem.layout_repository import FileSystemLayoutRepository
from adapters.layout.grid import GridFallbackLayoutEngine
from adapters.parsing.json_parser import JsonDiagramParser
from adapters.render.json_renderer import JsonLayoutRenderer
from adapters.text.char_width import CharWidthTextMeasurer
from app.config import AppSettings
from domain.ports.layout import GraphLayoutEngine
from domain.services.diagram_pipeline import DiagramPipeline
from domain.services.transforms.registry import build_transform_table

logger = logging.getLogger(__name__)


def sugiyama_available() -> bool:
    return importlib.util.find_spec("grandalf") is not None


def build_layout_engine(settings: AppSettings) -> GraphLayoutEngine:
    canvas = settings.layout.to_canvas_defaults()
    if settings.layout.graph_engine == "sugiyama":
        if sugiyama_available():
            from adapters.layout.sugiyama import SugiyamaLayoutEngine

            return SugiyamaLayoutEngine(canvas=canvas)
        logger.info("grandalf is not installed; graph diagrams use the grid fallback layout")
    return GridFallbackLayoutEngine(canvas=canvas)


def build_pipeline(settings: AppSettings) -> DiagramPipeline:
    transforms = build_transform_table(
        build_layout_engine(settings),
        text_measurer=CharWidthTextMeasurer(),
        canvas=settings.layout.to_canvas_defaults(),
        gantt_round_cap=settings.layout.gantt_round_cap,
        font_size=settings.layout.font_size,
    )
    return DiagramPipeline(
        transforms,
        parser=JsonDiagramParser(),
        renderer=JsonLayoutRenderer(include_source=settings.output.include_source),
    )


def build_diagram_repository() -> FileSystemDiagramRepository:
    return FileSystemDiagramRepository(JsonDiagramParser())


def build_layout_repository(settings: AppSettings) -> FileSystemLayoutRepository:
    return FileSystemLayoutRepository(JsonLayoutRenderer(include_source=settings.output.include_source))
