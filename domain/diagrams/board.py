from __future__ import annotations

from typing import Literal

from pydantic import Field

from domain.diagrams.base import DiagramBase, DiagramElement, arena_problems, duplicate_ids

BlockType = Literal["block", "space", "arrow"]


class Block(DiagramElement):
    id: str = Field(..., min_length=1)
    label: str | None = None
    width: int = Field(default=1, ge=1)
    shape: str = "rect"
    block_type: BlockType = "block"
    direction: str | None = None
    parent: int | None = None

    @property
    def space(self) -> bool:
        return self.block_type == "space"

    @property
    def arrow(self) -> bool:
        return self.block_type == "arrow"


class BlockConnection(DiagramElement):
    from_id: str
    to_id: str
    connection_type: Literal["arrow", "line"] = "arrow"
    label: str | None = None


class BlockDiagram(DiagramBase):
    """Blocks stored as an arena; compound blocks own the entries whose ``parent`` points at them."""

    kind: Literal["block"] = "block"
    columns: int = Field(default=1, ge=1)
    blocks: list[Block] = Field(default_factory=list)
    connections: list[BlockConnection] = Field(default_factory=list)

    def children_index(self) -> list[list[int]]:
        children: list[list[int]] = [[] for _ in self.blocks]
        for index, block in enumerate(self.blocks):
            if block.parent is not None:
                children[block.parent].append(index)
        return children

    def validation_problems(self) -> list[str]:
        problems = [f"Duplicate block id: {block_id}" for block_id in duplicate_ids(b.id for b in self.blocks)]
        problems.extend(arena_problems([block.parent for block in self.blocks], "Block"))
        for index, block in enumerate(self.blocks):
            if block.parent is not None and 0 <= block.parent < index and self.blocks[block.parent].space:
                problems.append(f"Block {block.id} is nested inside a space block")
        return problems


class KanbanCard(DiagramElement):
    id: str = Field(..., min_length=1)
    text: str = ""
    assigned: str | None = None
    ticket: str | None = None
    icon: str | None = None
    label: str | None = None
    priority: str | None = None

    def metadata(self) -> dict[str, str]:
        fields = {
            "assigned": self.assigned,
            "ticket": self.ticket,
            "icon": self.icon,
            "label": self.label,
            "priority": self.priority,
        }
        return {key: value for key, value in fields.items() if value is not None}


class KanbanColumn(DiagramElement):
    id: str = Field(..., min_length=1)
    title: str = ""
    cards: list[KanbanCard] = Field(default_factory=list)


class KanbanDiagram(DiagramBase):
    kind: Literal["kanban"] = "kanban"
    columns: list[KanbanColumn] = Field(default_factory=list)

    def validation_problems(self) -> list[str]:
        problems = [f"Duplicate column id: {column_id}" for column_id in duplicate_ids(c.id for c in self.columns)]
        card_ids = [card.id for column in self.columns for card in column.cards]
        problems.extend(f"Duplicate card id: {card_id}" for card_id in duplicate_ids(card_ids))
        return problems


class PacketField(DiagramElement):
    bit_start: int = Field(..., ge=0)
    bit_end: int = Field(..., ge=0)
    label: str = ""

    @property
    def size(self) -> int:
        return self.bit_end - self.bit_start + 1


class PacketDiagram(DiagramBase):
    kind: Literal["packet"] = "packet"
    bits_per_row: int = Field(default=32, ge=1)
    fields: list[PacketField] = Field(default_factory=list)

    def row_count(self) -> int:
        if not self.fields:
            return 0
        max_bit = max(field.bit_end for field in self.fields)
        return max_bit // self.bits_per_row + 1

    def validation_problems(self) -> list[str]:
        return [
            f"Field {field.label!r} ends before it starts ({field.bit_start}-{field.bit_end})"
            for field in self.fields
            if field.bit_end < field.bit_start
        ]
