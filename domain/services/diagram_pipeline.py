from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from domain.diagram_model import DiagramModel
from domain.diagrams.base import DiagramKind
from domain.errors import DiagramParseError
from domain.models import LayoutResult
from domain.ports.repositories import DiagramParser, LayoutRenderer
from domain.services.transforms.base import DiagramTransform
from domain.services.transforms.registry import transform_for

logger = logging.getLogger(__name__)


class DiagramPipeline:
    """Sequences parse -> transform -> render around an enum-keyed strategy table."""

    def __init__(
        self,
        transforms: Mapping[DiagramKind, DiagramTransform],
        parser: DiagramParser | None = None,
        renderer: LayoutRenderer | None = None,
    ) -> None:
        self.transforms = dict(transforms)
        self.parser = parser
        self.renderer = renderer

    def strategy_for(self, kind: DiagramKind | str) -> DiagramTransform:
        return transform_for(self.transforms, kind)

    def layout(self, model: DiagramModel) -> LayoutResult:
        transform = self.strategy_for(model.diagram_kind)
        logger.debug("Laying out %s diagram with %s", model.diagram_kind.value, type(transform).__name__)
        result = transform.transform(model)
        logger.debug(
            "Laid out %s diagram: %d nodes, %d edges, canvas %.0fx%.0f",
            result.kind,
            len(result.all_nodes()),
            len(result.edges),
            result.width,
            result.height,
        )
        return result

    def parse(self, source: str | bytes) -> DiagramModel:
        if self.parser is None:
            msg = "No diagram parser configured"
            raise DiagramParseError(msg)
        return self.parser.parse(source)

    def render(self, result: LayoutResult) -> Any:
        if self.renderer is None:
            return result
        return self.renderer.render(result)

    def run(self, source: str | bytes) -> Any:
        return self.render(self.layout(self.parse(source)))
