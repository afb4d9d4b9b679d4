from __future__ import annotations

import os
from collections.abc import Callable, Generator
from pathlib import Path
from typing import Any

import orjson
import pytest

from app.config import AppSettings, CanvasSettings
from domain.models import CanvasSize
from domain.services.node_positions import NodePositionCoordinator
from domain.services.viewport_overflow import ViewportOverflowTracker


def _clear_canvas_env() -> None:
    for key in list(os.environ):
        if key.startswith("CANVAS_"):
            os.environ.pop(key, None)


_clear_canvas_env()


@pytest.fixture(autouse=True)
def clear_canvas_env() -> Generator[None, None, None]:
    _clear_canvas_env()
    yield
    _clear_canvas_env()


@pytest.fixture
def canvas_settings() -> CanvasSettings:
    return CanvasSettings(
        width=800,
        height=600,
        min_zoom=0.1,
        max_zoom=3.0,
        default_zoom=1.0,
        zoom_step=1.2,
        snap_to_grid=False,
        grid_size=20,
        default_node_size="medium",
    )


@pytest.fixture
def canvas_settings_factory(
    canvas_settings: CanvasSettings,
) -> Callable[..., CanvasSettings]:
    def _factory(**overrides: object) -> CanvasSettings:
        return canvas_settings.model_copy(update=overrides)

    return _factory


@pytest.fixture
def app_settings(canvas_settings: CanvasSettings) -> AppSettings:
    return AppSettings(canvas=canvas_settings)


@pytest.fixture
def tracker() -> ViewportOverflowTracker:
    return ViewportOverflowTracker(CanvasSize(width=100, height=100))


@pytest.fixture
def coordinator(tracker: ViewportOverflowTracker) -> NodePositionCoordinator:
    return NodePositionCoordinator(tracker)


@pytest.fixture
def write_scene(tmp_path: Path) -> Callable[..., Path]:
    def _write(payload: dict[str, Any], name: str = "scene.json") -> Path:
        path = tmp_path / name
        path.write_bytes(orjson.dumps(payload))
        return path

    return _write
