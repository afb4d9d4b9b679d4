from __future__ import annotations

from collections.abc import Callable

from adapters.settings.footprint import SizedNodeFootprint
from app.config import CanvasSettings
from domain.models import CanvasSize, NodeSize, Point, Size
from domain.services.node_positions import NodePositionCoordinator
from domain.services.viewport_overflow import ViewportOverflowTracker


def test_sized_footprint_uses_per_node_size_and_default() -> None:
    footprint = SizedNodeFootprint({"a": "small", "b": NodeSize.LARGE}, default_size="medium")

    assert footprint("a") == Size(150, 100)
    assert footprint("b") == Size(300, 100)
    assert footprint("unknown") == Size(200, 100)


def test_invalid_sizes_fall_back_to_default() -> None:
    footprint = SizedNodeFootprint({"a": "gigantic"}, default_size="bogus")

    assert footprint.default_size is NodeSize.MEDIUM
    assert footprint("a") == Size(200, 100)


def test_from_settings_uses_default_node_size(
    canvas_settings_factory: Callable[..., CanvasSettings],
) -> None:
    settings = canvas_settings_factory(default_node_size=NodeSize.LARGE)

    footprint = SizedNodeFootprint.from_settings(settings, sizes={"a": "small"})

    assert footprint("a") == Size(150, 100)
    assert footprint("b") == Size(300, 100)


def test_sizes_are_copied_at_construction() -> None:
    sizes: dict[str, NodeSize | str] = {"a": "small"}
    footprint = SizedNodeFootprint(sizes)

    sizes["a"] = "large"
    sizes["b"] = "small"

    assert footprint.size_of("a") is NodeSize.SMALL
    assert footprint.size_of("b") is NodeSize.MEDIUM


def test_tracker_and_visible_nodes_agree_after_registration() -> None:
    sizes: dict[str, NodeSize | str] = {"a": "medium"}
    tracker = ViewportOverflowTracker(CanvasSize(width=250, height=100))
    coordinator = NodePositionCoordinator(tracker, footprint=SizedNodeFootprint(sizes))
    coordinator.register_node("a", Point(0, 0))
    coordinator.register_node("b", Point(260, 0))

    sizes["a"] = "large"

    assert tracker.elements[0].width == 200
    visible_ids = [node.id for node in coordinator.get_visible_nodes()]
    assert visible_ids == ["a"]
    assert len(visible_ids) == len(tracker.get_visible_elements())
