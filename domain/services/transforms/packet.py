from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

from domain.diagrams.base import DiagramKind
from domain.diagrams.board import PacketDiagram, PacketField
from domain.layout_details import PacketMetadata, PacketSegmentDetail
from domain.models import LayoutResult, PositionedNode
from domain.services.transforms.base import DiagramTransform

CELL_WIDTH = 30.0
CELL_HEIGHT = 40.0
PADDING = 40.0
HEADER_HEIGHT = 30.0
TITLE_HEIGHT = 40.0
TITLE_MARGIN = 20.0


@dataclass(frozen=True)
class BitSegment:
    bit_start: int
    bit_end: int
    row: int
    first_column: int
    last_column: int
    continuation: bool
    final: bool


def split_field(field: PacketField, bits_per_row: int) -> Iterator[BitSegment]:
    """Cut a bit range at row boundaries; the pieces partition [bit_start, bit_end] in order.

    A piece continues the field when it starts after ``bit_start``; it is final when it ends at ``bit_end``.
    """
    current = field.bit_start
    while current <= field.bit_end:
        row = current // bits_per_row
        segment_end = min(field.bit_end, (row + 1) * bits_per_row - 1)
        yield BitSegment(
            bit_start=current,
            bit_end=segment_end,
            row=row,
            first_column=current % bits_per_row,
            last_column=segment_end % bits_per_row,
            continuation=current > field.bit_start,
            final=segment_end == field.bit_end,
        )
        current = segment_end + 1


class PacketTransform(DiagramTransform):
    kind = DiagramKind.PACKET

    def layout(self, model: PacketDiagram) -> LayoutResult:
        metadata = PacketMetadata(bits_per_row=model.bits_per_row, rows=model.row_count())
        top = PADDING + HEADER_HEIGHT + (TITLE_HEIGHT + TITLE_MARGIN if model.title else 0.0)
        nodes: list[PositionedNode] = []
        for field_index, field in enumerate(model.fields):
            for segment_index, segment in enumerate(split_field(field, model.bits_per_row)):
                nodes.append(
                    PositionedNode(
                        id=f"field_{field_index}_{segment_index}",
                        x=PADDING + segment.first_column * CELL_WIDTH,
                        y=top + segment.row * CELL_HEIGHT,
                        width=(segment.last_column - segment.first_column + 1) * CELL_WIDTH,
                        height=CELL_HEIGHT,
                        role="field",
                        label=field.label,
                        source=field,
                        detail=PacketSegmentDetail(
                            bit_start=segment.bit_start,
                            bit_end=segment.bit_end,
                            row=segment.row,
                            continuation=segment.continuation,
                            final=segment.final,
                        ),
                    )
                )
        return self.finalize(nodes, [], metadata, model.title)
