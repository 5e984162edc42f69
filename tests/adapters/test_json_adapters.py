from __future__ import annotations

from datetime import date
from pathlib import Path

import orjson
import pytest

from adapters.filesystem.diagram_repository import FileSystemDiagramRepository
from adapters.filesystem.json_utils import dump_json_bytes, loads_commented_json, strip_line_comments
from adapters.filesystem.layout_repository import FileSystemLayoutRepository, layout_path_for
from adapters.parsing.json_parser import JsonDiagramParser
from adapters.render.json_renderer import JsonLayoutRenderer
from domain.diagrams.base import DiagramKind
from domain.diagrams.chart import PieDiagram
from domain.errors import DiagramParseError
from domain.services.diagram_pipeline import DiagramPipeline
from tests.helpers.diagram_fixtures import fixture_dir, load_diagram_fixture


def test_line_comments_are_stripped_outside_strings() -> None:
    content = '{\n  "url": "http://example.com", // trailing\n  // whole line\n  "n": 1\n}'
    assert loads_commented_json(content) == {"url": "http://example.com", "n": 1}
    assert strip_line_comments('"a\\"//b" // c') == '"a\\"//b" '


def test_parser_reads_commented_fixture() -> None:
    model = JsonDiagramParser().parse((fixture_dir() / "gantt.json").read_bytes())
    assert model.diagram_kind is DiagramKind.GANTT
    assert [section.name for section in model.sections] == ["Build", "Ship"]


def test_parser_applies_default_kind() -> None:
    model = JsonDiagramParser(default_kind=DiagramKind.PIE).parse('{"slices": [{"label": "a", "value": 1}]}')
    assert isinstance(model, PieDiagram)


@pytest.mark.parametrize(
    ("source", "message"),
    [
        ("{not json", "not valid JSON"),
        ("[1, 2]", "must be a JSON object"),
        ('{"kind": "venn"}', "does not match"),
        ('{"kind": "pie", "slices": [{"label": "a", "value": -1}]}', "does not match"),
        (b"\xff\xfe", "not valid JSON"),
    ],
)
def test_parser_errors_are_wrapped(source: str | bytes, message: str) -> None:
    with pytest.raises(DiagramParseError, match=message):
        JsonDiagramParser().parse(source)


def test_renderer_serialises_nodes_edges_and_metadata(pipeline: DiagramPipeline) -> None:
    result = pipeline.layout(load_diagram_fixture("flowchart.json"))
    rendered = JsonLayoutRenderer().render(result)

    assert rendered["kind"] == "flowchart"
    assert rendered["title"] == "Checkout"
    assert rendered["metadata"]["type"] == "GraphMetadata"
    assert rendered["metadata"]["engine"] == "grid"
    node = rendered["nodes"][0]
    assert set(node) == {"id", "role", "label", "x", "y", "width", "height", "detail"}
    assert node["detail"]["type"] == "GraphNodeDetail"
    edge = rendered["edges"][0]
    assert edge["points"][0] == {"x": result.edges[0].start.x, "y": result.edges[0].start.y}
    assert "source" not in edge


def test_renderer_includes_source_and_children_on_request(pipeline: DiagramPipeline) -> None:
    result = pipeline.layout(load_diagram_fixture("mindmap.json"))
    rendered = JsonLayoutRenderer(include_source=True).render(result)
    decoded = orjson.loads(dump_json_bytes(rendered))

    assert decoded["nodes"][0]["source"]["content"]
    assert decoded["metadata"]["max_depth"] == 2


def test_dates_in_metadata_serialise(pipeline: DiagramPipeline) -> None:
    result = pipeline.layout(load_diagram_fixture("gantt.json"))
    decoded = orjson.loads(JsonLayoutRenderer().render_bytes(result))

    assert decoded["metadata"]["min_date"] == date(2023, 12, 31).isoformat()


def test_diagram_repository_skips_layout_outputs(tmp_path: Path) -> None:
    (tmp_path / "b.json").write_text('{"kind": "pie", "slices": []}', encoding="utf-8")
    (tmp_path / "a.json").write_text('{"kind": "packet"} // packet', encoding="utf-8")
    (tmp_path / "a.layout.json").write_text("{}", encoding="utf-8")
    (tmp_path / "notes.txt").write_text("ignored", encoding="utf-8")

    repository = FileSystemDiagramRepository()
    assert [path.name for path in repository.iter_paths(tmp_path)] == ["a.json", "b.json"]
    kinds = [model.diagram_kind for model in repository.load_all(tmp_path)]
    assert kinds == [DiagramKind.PACKET, DiagramKind.PIE]


def test_layout_repository_round_trips_rendered_layout(tmp_path: Path, pipeline: DiagramPipeline) -> None:
    source = fixture_dir() / "pie.json"
    target = layout_path_for(source, tmp_path / "out")
    assert target == tmp_path / "out" / "pie.layout.json"

    repository = FileSystemLayoutRepository()
    repository.save(pipeline.layout(load_diagram_fixture("pie.json")), target)

    saved = repository.load(target)
    assert saved["kind"] == "pie"
    assert saved["schema_version"] == "1.0"
    assert not target.with_suffix(".json.tmp").exists()
