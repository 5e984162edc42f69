from __future__ import annotations

from domain.diagrams.base import DiagramKind
from domain.diagrams.board import KanbanCard, KanbanColumn, KanbanDiagram
from domain.layout_details import KanbanCardDetail, KanbanColumnDetail, KanbanMetadata
from domain.models import LayoutResult, PositionedNode
from domain.services.transforms.base import DiagramTransform

COLUMN_WIDTH = 200.0
COLUMN_GAP = 60.0
COLUMN_HEADER_HEIGHT = 50.0
COLUMN_PADDING = 10.0
CARD_HEIGHT = 80.0
CARD_GAP = 15.0
METADATA_LINE_HEIGHT = 18.0


def card_height(card: KanbanCard) -> float:
    return CARD_HEIGHT + len(card.metadata()) * METADATA_LINE_HEIGHT


def column_height(column: KanbanColumn) -> float:
    if not column.cards:
        return COLUMN_HEADER_HEIGHT + COLUMN_PADDING
    cards = sum(card_height(card) for card in column.cards)
    gaps = (len(column.cards) - 1) * CARD_GAP
    return COLUMN_HEADER_HEIGHT + COLUMN_PADDING * 2 + cards + gaps


class KanbanTransform(DiagramTransform):
    """Columns left to right; cards stacked under each column header as nested nodes."""

    kind = DiagramKind.KANBAN

    def layout(self, model: KanbanDiagram) -> LayoutResult:
        card_count = sum(len(column.cards) for column in model.columns)
        metadata = KanbanMetadata(column_count=len(model.columns), card_count=card_count)
        nodes = [
            self._column_node(column, index * (COLUMN_WIDTH + COLUMN_GAP))
            for index, column in enumerate(model.columns)
        ]
        return self.finalize(nodes, [], metadata, model.title)

    def _column_node(self, column: KanbanColumn, x: float) -> PositionedNode:
        cards: list[PositionedNode] = []
        y = COLUMN_HEADER_HEIGHT + COLUMN_PADDING
        for card in column.cards:
            height = card_height(card)
            cards.append(
                PositionedNode(
                    id=card.id,
                    x=x + COLUMN_PADDING,
                    y=y,
                    width=COLUMN_WIDTH - COLUMN_PADDING * 2,
                    height=height,
                    role="card",
                    label=card.text,
                    source=card,
                    detail=KanbanCardDetail(column_id=column.id, metadata=tuple(card.metadata().items())),
                )
            )
            y += height + CARD_GAP
        return PositionedNode(
            id=column.id,
            x=x,
            y=0.0,
            width=COLUMN_WIDTH,
            height=column_height(column),
            role="column",
            label=column.title,
            source=column,
            detail=KanbanColumnDetail(card_count=len(column.cards)),
            children=tuple(cards),
        )
