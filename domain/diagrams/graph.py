from __future__ import annotations

from typing import Literal

from pydantic import Field, field_validator

from domain.diagrams.base import DiagramBase, DiagramElement, duplicate_ids, nesting_cycles

DIRECTIONS = ("TD", "TB", "BT", "LR", "RL")


def _normalize_direction(value: object) -> str:
    direction = str(value or "TD").strip().upper()
    if direction not in DIRECTIONS:
        msg = f"Unknown direction: {value}"
        raise ValueError(msg)
    return direction


class FlowchartNode(DiagramElement):
    id: str = Field(..., min_length=1)
    label: str = ""
    shape: str = "rect"
    classes: list[str] = Field(default_factory=list)

    @property
    def display_label(self) -> str:
        return self.label or self.id


class FlowchartEdge(DiagramElement):
    source_id: str
    target_id: str
    label: str | None = None
    arrow_type: str = "arrow"


class FlowchartDiagram(DiagramBase):
    kind: Literal["flowchart"] = "flowchart"
    direction: str = "TD"
    nodes: list[FlowchartNode] = Field(default_factory=list)
    edges: list[FlowchartEdge] = Field(default_factory=list)

    @field_validator("direction", mode="before")
    @classmethod
    def normalize_direction(cls, value: object) -> str:
        return _normalize_direction(value)

    def validation_problems(self) -> list[str]:
        return [f"Duplicate node id: {node_id}" for node_id in duplicate_ids(n.id for n in self.nodes)]


class SequenceParticipant(DiagramElement):
    id: str = Field(..., min_length=1)
    label: str = ""
    actor_type: str = "participant"

    @property
    def display_label(self) -> str:
        return self.label or self.id


class SequenceMessage(DiagramElement):
    from_id: str
    to_id: str
    text: str | None = None
    arrow_type: str = "solid"


class SequenceNote(DiagramElement):
    text: str
    position: str = "right of"
    participant_ids: list[str] = Field(default_factory=list)


class SequenceDiagram(DiagramBase):
    kind: Literal["sequence"] = "sequence"
    participants: list[SequenceParticipant] = Field(default_factory=list)
    messages: list[SequenceMessage] = Field(default_factory=list)
    notes: list[SequenceNote] = Field(default_factory=list)

    def validation_problems(self) -> list[str]:
        return [
            f"Duplicate participant id: {participant_id}"
            for participant_id in duplicate_ids(p.id for p in self.participants)
        ]


class ClassMember(DiagramElement):
    name: str
    member_type: str | None = None
    visibility: str | None = None
    parameters: str | None = None
    is_method: bool = False

    def signature(self) -> str:
        prefix = self.visibility or ""
        if self.is_method:
            text = f"{prefix}{self.name}({self.parameters or ''})"
            return f"{text} {self.member_type}" if self.member_type else text
        if self.member_type:
            return f"{prefix}{self.member_type} {self.name}"
        return f"{prefix}{self.name}"


class ClassEntity(DiagramElement):
    id: str = Field(..., min_length=1)
    name: str = ""
    stereotype: str | None = None
    attributes: list[ClassMember] = Field(default_factory=list)
    methods: list[ClassMember] = Field(default_factory=list)

    @property
    def display_name(self) -> str:
        return self.name or self.id


class ClassRelationship(DiagramElement):
    from_id: str
    to_id: str
    relationship_type: str = "association"
    label: str | None = None
    source_cardinality: str | None = None
    target_cardinality: str | None = None


class ClassDiagram(DiagramBase):
    kind: Literal["class"] = "class"
    direction: str = "TD"
    entities: list[ClassEntity] = Field(default_factory=list)
    relationships: list[ClassRelationship] = Field(default_factory=list)

    @field_validator("direction", mode="before")
    @classmethod
    def normalize_direction(cls, value: object) -> str:
        return _normalize_direction(value)

    def validation_problems(self) -> list[str]:
        return [f"Duplicate class id: {class_id}" for class_id in duplicate_ids(e.id for e in self.entities)]


StateType = Literal["normal", "start", "end", "choice", "fork", "join"]


class StateNode(DiagramElement):
    id: str = Field(..., min_length=1)
    label: str | None = None
    state_type: StateType = "normal"
    description: str | None = None


class StateTransition(DiagramElement):
    from_id: str
    to_id: str
    label: str | None = None


class StateDiagram(DiagramBase):
    kind: Literal["state"] = "state"
    direction: str = "TD"
    states: list[StateNode] = Field(default_factory=list)
    transitions: list[StateTransition] = Field(default_factory=list)

    @field_validator("direction", mode="before")
    @classmethod
    def normalize_direction(cls, value: object) -> str:
        return _normalize_direction(value)

    def validation_problems(self) -> list[str]:
        return [f"Duplicate state id: {state_id}" for state_id in duplicate_ids(s.id for s in self.states)]


class ErAttribute(DiagramElement):
    name: str
    attribute_type: str | None = None
    key_type: str | None = None

    def display_text(self) -> str:
        parts = [part for part in (self.key_type, self.name, self.attribute_type) if part]
        return " ".join(parts)


class ErEntity(DiagramElement):
    id: str = Field(..., min_length=1)
    name: str = ""
    attributes: list[ErAttribute] = Field(default_factory=list)

    @property
    def display_name(self) -> str:
        return self.name or self.id


class ErRelationship(DiagramElement):
    from_id: str
    to_id: str
    label: str | None = None
    cardinality_from: str | None = None
    cardinality_to: str | None = None
    identifying: bool = True


class ErDiagram(DiagramBase):
    kind: Literal["er"] = "er"
    entities: list[ErEntity] = Field(default_factory=list)
    relationships: list[ErRelationship] = Field(default_factory=list)

    def validation_problems(self) -> list[str]:
        return [f"Duplicate entity id: {entity_id}" for entity_id in duplicate_ids(e.id for e in self.entities)]


class C4Element(DiagramElement):
    id: str = Field(..., min_length=1)
    label: str = ""
    element_type: str = "System"
    description: str | None = None
    technology: str | None = None
    boundary_id: str | None = None

    @property
    def base_type(self) -> str:
        return self.element_type.removesuffix("_Ext")

    @property
    def external(self) -> bool:
        return self.element_type.endswith("_Ext")


class C4Boundary(DiagramElement):
    id: str = Field(..., min_length=1)
    label: str = ""
    boundary_type: str = "System_Boundary"
    parent_id: str | None = None


class C4Relationship(DiagramElement):
    from_id: str
    to_id: str
    label: str | None = None
    technology: str | None = None
    rel_type: str = "Rel"

    @property
    def bidirectional(self) -> bool:
        return self.rel_type == "BiRel"


class C4Diagram(DiagramBase):
    kind: Literal["c4"] = "c4"
    level: str = "Context"
    elements: list[C4Element] = Field(default_factory=list)
    boundaries: list[C4Boundary] = Field(default_factory=list)
    relationships: list[C4Relationship] = Field(default_factory=list)

    def elements_in(self, boundary_id: str | None) -> list[C4Element]:
        return [element for element in self.elements if element.boundary_id == boundary_id]

    def boundaries_in(self, parent_id: str | None) -> list[C4Boundary]:
        return [boundary for boundary in self.boundaries if boundary.parent_id == parent_id]

    def validation_problems(self) -> list[str]:
        ids = [element.id for element in self.elements] + [b.id for b in self.boundaries]
        problems = [f"Duplicate C4 id: {item}" for item in duplicate_ids(ids)]
        boundary_ids = {boundary.id for boundary in self.boundaries}
        for boundary in self.boundaries:
            if boundary.parent_id is not None and boundary.parent_id not in boundary_ids:
                problems.append(f"Boundary {boundary.id} references unknown parent {boundary.parent_id}")
        for element in self.elements:
            if element.boundary_id is not None and element.boundary_id not in boundary_ids:
                problems.append(f"Element {element.id} references unknown boundary {element.boundary_id}")
        problems.extend(nesting_cycles({b.id: b.parent_id for b in self.boundaries}, "Boundary"))
        return problems


class JourneyTask(DiagramElement):
    name: str
    score: int = Field(default=3, ge=1, le=5)
    actors: list[str] = Field(default_factory=list)


class JourneySection(DiagramElement):
    name: str
    tasks: list[JourneyTask] = Field(default_factory=list)


class UserJourneyDiagram(DiagramBase):
    kind: Literal["user_journey"] = "user_journey"
    sections: list[JourneySection] = Field(default_factory=list)

    def all_tasks(self) -> list[tuple[JourneySection, JourneyTask]]:
        return [(section, task) for section in self.sections for task in section.tasks]


ArchitectureSide = Literal["L", "R", "T", "B"]


class ArchitectureGroup(DiagramElement):
    id: str = Field(..., min_length=1)
    label: str = ""
    icon: str | None = None
    parent_id: str | None = None


class ArchitectureService(DiagramElement):
    id: str = Field(..., min_length=1)
    label: str = ""
    icon: str | None = None
    group_id: str | None = None

    @property
    def display_label(self) -> str:
        return self.label or self.id


class ArchitectureEdge(DiagramElement):
    from_id: str
    to_id: str
    from_side: ArchitectureSide = "R"
    to_side: ArchitectureSide = "L"
    label: str | None = None


class ArchitectureDiagram(DiagramBase):
    kind: Literal["architecture"] = "architecture"
    groups: list[ArchitectureGroup] = Field(default_factory=list)
    services: list[ArchitectureService] = Field(default_factory=list)
    edges: list[ArchitectureEdge] = Field(default_factory=list)

    def services_in(self, group_id: str | None) -> list[ArchitectureService]:
        return [service for service in self.services if service.group_id == group_id]

    def groups_in(self, parent_id: str | None) -> list[ArchitectureGroup]:
        return [group for group in self.groups if group.parent_id == parent_id]

    def validation_problems(self) -> list[str]:
        ids = [group.id for group in self.groups] + [service.id for service in self.services]
        problems = [f"Duplicate architecture id: {item}" for item in duplicate_ids(ids)]
        group_ids = {group.id for group in self.groups}
        for group in self.groups:
            if group.parent_id is not None and group.parent_id not in group_ids:
                problems.append(f"Group {group.id} references unknown parent {group.parent_id}")
        for service in self.services:
            if service.group_id is not None and service.group_id not in group_ids:
                problems.append(f"Service {service.id} references unknown group {service.group_id}")
        problems.extend(nesting_cycles({g.id: g.parent_id for g in self.groups}, "Group"))
        return problems


RequirementRelation = Literal["contains", "copies", "derives", "satisfies", "verifies", "refines", "traces"]


class Requirement(DiagramElement):
    name: str = Field(..., min_length=1)
    requirement_type: str = "requirement"
    id: str | None = None
    text: str | None = None
    risk: Literal["low", "medium", "high"] | None = None
    verify_method: Literal["analysis", "inspection", "test", "demonstration"] | None = None

    @field_validator("risk", "verify_method", mode="before")
    @classmethod
    def lowercase(cls, value: object) -> object:
        return value.lower() if isinstance(value, str) else value


class RequirementElement(DiagramElement):
    name: str = Field(..., min_length=1)
    element_type: str | None = None
    docref: str | None = None


class RequirementRelationship(DiagramElement):
    source: str
    target: str
    relationship_type: RequirementRelation = "traces"


class RequirementDiagram(DiagramBase):
    """Requirements and elements share one name space; relationships point from ``source`` to ``target``."""

    kind: Literal["requirement"] = "requirement"
    requirements: list[Requirement] = Field(default_factory=list)
    elements: list[RequirementElement] = Field(default_factory=list)
    relationships: list[RequirementRelationship] = Field(default_factory=list)

    def validation_problems(self) -> list[str]:
        names = [requirement.name for requirement in self.requirements] + [e.name for e in self.elements]
        return [f"Duplicate requirement or element name: {name}" for name in duplicate_ids(names)]
