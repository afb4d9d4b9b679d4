from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from app.config import CanvasSettings, load_settings
from domain.models import NodeSize


def test_defaults_without_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)

    settings = load_settings()

    assert settings.canvas.min_zoom == 0.1
    assert settings.canvas.max_zoom == 3.0
    assert settings.canvas.default_zoom == 1.0
    assert settings.canvas.snap_to_grid is False
    assert settings.canvas.grid_size == 20
    assert settings.canvas.default_node_size is NodeSize.MEDIUM


def test_yaml_config_is_loaded(tmp_path: Path) -> None:
    config_path = tmp_path / "canvas.yaml"
    config_path.write_text(
        "canvas:\n  snap_to_grid: true\n  grid_size: 15\n  default_node_size: large\n",
        encoding="utf-8",
    )

    settings = load_settings(config_path)

    assert settings.canvas.snap_to_grid is True
    assert settings.canvas.grid_size == 15
    assert settings.canvas.default_node_size is NodeSize.LARGE


def test_env_overrides_yaml(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    config_path = tmp_path / "canvas.yaml"
    config_path.write_text("canvas:\n  grid_size: 15\n", encoding="utf-8")
    monkeypatch.setenv("CANVAS_CONFIG_PATH", str(config_path))
    monkeypatch.setenv("CANVAS_CANVAS__SNAP_TO_GRID", "true")

    settings = load_settings()

    assert settings.canvas.snap_to_grid is True
    assert settings.canvas.grid_size == 15


def test_env_outranks_config_file_value(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    config_path = tmp_path / "canvas.yaml"
    config_path.write_text("canvas:\n  grid_size: 15\n", encoding="utf-8")
    monkeypatch.setenv("CANVAS_CANVAS__GRID_SIZE", "40")

    settings = load_settings(config_path)

    assert settings.canvas.grid_size == 40


def test_empty_config_file_uses_defaults(tmp_path: Path) -> None:
    config_path = tmp_path / "canvas.yaml"
    config_path.write_text("", encoding="utf-8")

    assert load_settings(config_path).canvas.grid_size == 20


def test_non_mapping_config_file_is_rejected(tmp_path: Path) -> None:
    config_path = tmp_path / "canvas.yaml"
    config_path.write_text("- just\n- a list\n", encoding="utf-8")

    with pytest.raises(ValueError, match="must contain a mapping"):
        load_settings(config_path)


def test_missing_config_file_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_settings(tmp_path / "missing.yaml")


@pytest.mark.parametrize(
    "overrides",
    [
        {"grid_size": 0},
        {"grid_size": float("inf")},
        {"grid_size": float("nan")},
        {"min_zoom": 2.0, "max_zoom": 1.0},
        {"min_zoom": 0},
        {"default_node_size": "gigantic"},
    ],
)
def test_invalid_canvas_settings_are_rejected(overrides: dict[str, object]) -> None:
    with pytest.raises(ValidationError):
        CanvasSettings(**overrides)
