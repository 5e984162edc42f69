from __future__ import annotations

import os
from collections.abc import Callable, Generator

import pytest

from adapters.layout.grid import GridFallbackLayoutEngine
from adapters.text.char_width import CharWidthTextMeasurer
from app.config import AppSettings, LayoutSettings
from domain.diagrams.base import DiagramKind
from domain.services.diagram_pipeline import DiagramPipeline
from domain.services.transforms.base import DiagramTransform
from domain.services.transforms.registry import build_transform_table


def _clear_layout_env() -> None:
    for key in list(os.environ):
        if key.startswith("DIAGRAM_LAYOUT_"):
            os.environ.pop(key, None)


_clear_layout_env()


@pytest.fixture(autouse=True)
def clear_layout_env() -> Generator[None, None, None]:
    _clear_layout_env()
    yield
    _clear_layout_env()


@pytest.fixture
def measurer() -> CharWidthTextMeasurer:
    return CharWidthTextMeasurer()


@pytest.fixture
def transform_table(measurer: CharWidthTextMeasurer) -> dict[DiagramKind, DiagramTransform]:
    return build_transform_table(GridFallbackLayoutEngine(), text_measurer=measurer)


@pytest.fixture
def pipeline(transform_table: dict[DiagramKind, DiagramTransform]) -> DiagramPipeline:
    return DiagramPipeline(transform_table)


@pytest.fixture
def app_settings_factory() -> Callable[..., AppSettings]:
    def _factory(**overrides: object) -> AppSettings:
        return AppSettings(layout=LayoutSettings().model_copy(update=overrides))

    return _factory
