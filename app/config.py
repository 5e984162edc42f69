from __future__ import annotations

import os
from pathlib import Path
from typing import ClassVar, Literal

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic_settings.sources import PydanticBaseSettingsSource, YamlConfigSettingsSource

from domain.models import CanvasDefaults
from domain.services.gantt_schedule import DEFAULT_ROUND_CAP

DEFAULT_CONFIG_PATH = Path("config/layout.yaml")
CONFIG_PATH_ENV = "DIAGRAM_LAYOUT_CONFIG_PATH"

GraphEngineName = Literal["grid", "sugiyama"]


class LayoutSettings(BaseModel):
    graph_engine: GraphEngineName = "grid"
    padding: float = Field(default=20.0, ge=0)
    min_width: float = Field(default=800.0, gt=0)
    min_height: float = Field(default=600.0, gt=0)
    gantt_round_cap: int = Field(default=DEFAULT_ROUND_CAP, ge=1)
    font_size: float = Field(default=14.0, gt=0)

    @field_validator("graph_engine", mode="before")
    @classmethod
    def normalize_engine(cls, value: object) -> str:
        return str(value).strip().lower() if value else "grid"

    def to_canvas_defaults(self) -> CanvasDefaults:
        return CanvasDefaults(padding=self.padding, min_width=self.min_width, min_height=self.min_height)


class OutputSettings(BaseModel):
    input_dir: Path = Path("data/diagrams")
    output_dir: Path = Path("data/layouts")
    include_source: bool = False


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="DIAGRAM_LAYOUT_", env_nested_delimiter="__")

    layout: LayoutSettings = LayoutSettings()
    output: OutputSettings = OutputSettings()
    log_level: str = "WARNING"

    _yaml_path: ClassVar[Path | None] = None

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value: object) -> str:
        return str(value).upper() if value else "WARNING"

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # Environment wins over the YAML file.
        yaml_sources = (YamlConfigSettingsSource(settings_cls, yaml_file=cls._yaml_path),) if cls._yaml_path else ()
        return (init_settings, env_settings, dotenv_settings, file_secret_settings, *yaml_sources)


def resolve_config_path(config_path: Path | None = None) -> Path | None:
    """Explicit path, then $DIAGRAM_LAYOUT_CONFIG_PATH, then config/layout.yaml if present."""
    if config_path is None and os.getenv(CONFIG_PATH_ENV):
        config_path = Path(os.environ[CONFIG_PATH_ENV])
    if config_path is None:
        return DEFAULT_CONFIG_PATH if DEFAULT_CONFIG_PATH.exists() else None
    if not config_path.exists():
        msg = f"Config file not found: {config_path}"
        raise FileNotFoundError(msg)
    return config_path


def load_settings(config_path: Path | None = None) -> AppSettings:
    yaml_path = resolve_config_path(config_path)
    previous = AppSettings._yaml_path
    AppSettings._yaml_path = yaml_path
    try:
        return AppSettings()
    finally:
        AppSettings._yaml_path = previous
