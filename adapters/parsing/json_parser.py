from __future__ import annotations

import logging
from typing import Any

import orjson
from pydantic import ValidationError

from adapters.filesystem.json_utils import loads_commented_json
from domain.diagram_model import DiagramModel, parse_diagram
from domain.diagrams.base import DiagramKind
from domain.errors import DiagramParseError
from domain.ports.repositories import DiagramParser

logger = logging.getLogger(__name__)


class JsonDiagramParser(DiagramParser):
    """Reads a diagram model from a JSON document tagged with a ``kind`` field."""

    def __init__(self, default_kind: DiagramKind | None = None) -> None:
        self.default_kind = default_kind

    def parse(self, source: str | bytes) -> DiagramModel:
        try:
            payload = loads_commented_json(source)
        except (orjson.JSONDecodeError, UnicodeDecodeError) as exc:
            msg = f"Diagram source is not valid JSON: {exc}"
            raise DiagramParseError(msg) from exc
        return self.parse_payload(payload)

    def parse_payload(self, payload: Any) -> DiagramModel:
        if not isinstance(payload, dict):
            msg = "Diagram source must be a JSON object"
            raise DiagramParseError(msg)
        if "kind" not in payload and self.default_kind is not None:
            payload = {**payload, "kind": self.default_kind.value}
        try:
            model = parse_diagram(payload)
        except ValidationError as exc:
            msg = f"Diagram source does not match a known diagram model: {exc}"
            raise DiagramParseError(msg) from exc
        logger.debug("Parsed %s diagram", model.diagram_kind.value)
        return model
