from __future__ import annotations

from domain.diagrams.base import DiagramKind
from domain.diagrams.message import ErrorDiagram, InfoDiagram
from domain.layout_details import MessageDetail, MessageMetadata
from domain.models import LayoutResult, PositionedNode
from domain.services.transforms.base import DiagramTransform

PANEL_WIDTH = 400.0
PANEL_HEIGHT = 100.0
PANEL_MARGIN = 40.0
TEXT_PADDING = 20.0
INFO_TEXT = "Diagram layout"


class MessageTransform(DiagramTransform):
    """A single fixed-size panel; wider only when its text needs it."""

    severity = "info"

    def panel(self, text: str) -> list[PositionedNode]:
        width = max(PANEL_WIDTH, self.measure(text).width + TEXT_PADDING * 2)
        return [
            PositionedNode(
                id=self.severity,
                x=PANEL_MARGIN,
                y=PANEL_MARGIN,
                width=width,
                height=PANEL_HEIGHT,
                role=self.severity,
                label=text,
                detail=MessageDetail(severity=self.severity),
            )
        ]


class ErrorTransform(MessageTransform):
    kind = DiagramKind.ERROR
    severity = "error"

    def layout(self, model: ErrorDiagram) -> LayoutResult:
        metadata = MessageMetadata(severity=self.severity, text=model.message)
        nodes = self.panel(model.message) if model.message else []
        return self.finalize(nodes, [], metadata, model.title)


class InfoTransform(MessageTransform):
    kind = DiagramKind.INFO

    def layout(self, model: InfoDiagram) -> LayoutResult:
        text = model.title or INFO_TEXT
        metadata = MessageMetadata(severity=self.severity, text=text if model.show_info else None)
        nodes = self.panel(text) if model.show_info else []
        return self.finalize(nodes, [], metadata, model.title)
