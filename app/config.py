from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic_settings.sources import PydanticBaseSettingsSource

from domain.models import NodeSize
from domain.node_sizes import DEFAULT_NODE_SIZE, normalize_node_size
from domain.services.viewport_overflow import (
    DEFAULT_MAX_ZOOM,
    DEFAULT_MIN_ZOOM,
    DEFAULT_ZOOM,
    DEFAULT_ZOOM_STEP,
)

DEFAULT_CONFIG_PATH = Path("config/canvas.yaml")


class CanvasSettings(BaseModel):
    width: float = Field(default=1280.0, ge=0)
    height: float = Field(default=720.0, ge=0)
    min_zoom: float = Field(default=DEFAULT_MIN_ZOOM, gt=0)
    max_zoom: float = Field(default=DEFAULT_MAX_ZOOM, gt=0)
    default_zoom: float = DEFAULT_ZOOM
    zoom_step: float = Field(default=DEFAULT_ZOOM_STEP, gt=0)
    snap_to_grid: bool = False
    grid_size: float = Field(default=20.0, gt=0, allow_inf_nan=False)
    default_node_size: NodeSize = DEFAULT_NODE_SIZE

    @field_validator("default_node_size", mode="before")
    @classmethod
    def normalize_default_node_size(cls, value: object) -> NodeSize:
        normalized = normalize_node_size(value)  # type: ignore[arg-type]
        if normalized is None:
            msg = f"canvas.default_node_size must be one of: {', '.join(s.value for s in NodeSize)}"
            raise ValueError(msg)
        return normalized

    @model_validator(mode="after")
    def ensure_zoom_range(self) -> CanvasSettings:
        if self.min_zoom > self.max_zoom:
            msg = "canvas.min_zoom must not exceed canvas.max_zoom"
            raise ValueError(msg)
        return self


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="CANVAS_", env_nested_delimiter="__")

    canvas: CanvasSettings = CanvasSettings()

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # Constructor values come from the config file, so the environment outranks them.
        return env_settings, dotenv_settings, init_settings, file_secret_settings


def resolve_config_path(config_path: Path | None = None) -> Path | None:
    if config_path is not None:
        return config_path
    env_path = os.getenv("CANVAS_CONFIG_PATH")
    if env_path:
        return Path(env_path)
    return DEFAULT_CONFIG_PATH if DEFAULT_CONFIG_PATH.exists() else None


def read_config_file(path: Path) -> dict[str, Any]:
    if not path.exists():
        msg = f"Config file not found: {path}"
        raise FileNotFoundError(msg)
    data = yaml.safe_load(path.read_text(encoding="utf-8"))
    if data is None:
        return {}
    if not isinstance(data, dict):
        msg = f"Config file must contain a mapping: {path}"
        raise ValueError(msg)
    return data


def load_settings(config_path: Path | None = None) -> AppSettings:
    resolved_path = resolve_config_path(config_path)
    values = read_config_file(resolved_path) if resolved_path is not None else {}
    return AppSettings(**values)
