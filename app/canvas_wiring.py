from __future__ import annotations

from collections.abc import Mapping

from adapters.settings.footprint import SizedNodeFootprint
from adapters.settings.grid_snap import SettingsGridSnapPolicyProvider
from app.config import AppSettings
from domain.models import CanvasSize, NodeSize, Point, SceneDocument
from domain.services.node_positions import NodePositionCoordinator
from domain.services.viewport_overflow import ViewportOverflowTracker


def build_tracker(
    settings: AppSettings, canvas: CanvasSize | None = None
) -> ViewportOverflowTracker:
    canvas_settings = settings.canvas
    return ViewportOverflowTracker(
        canvas or CanvasSize(width=canvas_settings.width, height=canvas_settings.height),
        min_zoom=canvas_settings.min_zoom,
        max_zoom=canvas_settings.max_zoom,
        zoom=canvas_settings.default_zoom,
        zoom_step=canvas_settings.zoom_step,
    )


def build_coordinator(
    settings: AppSettings,
    tracker: ViewportOverflowTracker,
    sizes: Mapping[str, NodeSize | str] | None = None,
) -> NodePositionCoordinator:
    return NodePositionCoordinator(
        tracker,
        grid_snap_provider=SettingsGridSnapPolicyProvider.from_settings(settings.canvas),
        footprint=SizedNodeFootprint.from_settings(settings.canvas, sizes=sizes),
    )


def load_scene(settings: AppSettings, scene: SceneDocument) -> NodePositionCoordinator:
    tracker = build_tracker(settings, canvas=scene.canvas.to_canvas_size())
    if scene.zoom is not None:
        tracker.set_zoom(scene.zoom)
    coordinator = build_coordinator(settings, tracker, sizes=scene.node_sizes())
    for node in scene.nodes:
        coordinator.register_node(node.id, Point(x=node.x, y=node.y))
    return coordinator
