from __future__ import annotations

import logging
import math
from collections.abc import Callable
from dataclasses import dataclass
from typing import Dict, List, Protocol

from domain.models import (
    DragStartEvent,
    DragUpdateEvent,
    GridSnapPolicy,
    NodePosition,
    OverflowResult,
    Rectangle,
    Size,
)
from domain.node_sizes import DEFAULT_FOOTPRINT
from domain.ports.canvas import GridSnapPolicyProvider, NodeFootprint, PositionListener
from domain.services.viewport_overflow import ViewportOverflowTracker, is_element_visible

logger = logging.getLogger(__name__)


class _HasCoordinates(Protocol):
    @property
    def x(self) -> float: ...

    @property
    def y(self) -> float: ...


@dataclass(frozen=True)
class StaticGridSnapPolicyProvider(GridSnapPolicyProvider):
    policy: GridSnapPolicy = GridSnapPolicy()

    def get_grid_snap_policy(self) -> GridSnapPolicy:
        return self.policy


@dataclass(frozen=True)
class ConstantNodeFootprint(NodeFootprint):
    size: Size = DEFAULT_FOOTPRINT

    def __call__(self, node_id: str) -> Size:
        return self.size


def snap_to_grid(value: float, grid_size: float) -> float:
    # Half-way values round up, matching the canvas widget's rounding.
    return math.floor(value / grid_size + 0.5) * grid_size


class NodePositionCoordinator:
    """Owns node positions and the single-node drag session.

    Every structural change republishes the full rectangle list to the
    viewport tracker. Drag updates only apply to the node that started the
    current drag; anything else is discarded without notifying listeners.
    """

    def __init__(
        self,
        tracker: ViewportOverflowTracker,
        grid_snap_provider: GridSnapPolicyProvider | None = None,
        footprint: NodeFootprint | None = None,
    ) -> None:
        self._tracker = tracker
        self._grid_snap_provider = grid_snap_provider or StaticGridSnapPolicyProvider()
        self._footprint = footprint or ConstantNodeFootprint()
        self._nodes: Dict[str, NodePosition] = {}
        self._dragged_node_id: str | None = None
        self._listeners: List[PositionListener] = []
        self._last_result: OverflowResult | None = None

    @property
    def tracker(self) -> ViewportOverflowTracker:
        return self._tracker

    @property
    def dragged_node_id(self) -> str | None:
        return self._dragged_node_id

    @property
    def is_dragging(self) -> bool:
        return self._dragged_node_id is not None

    @property
    def last_result(self) -> OverflowResult | None:
        return self._last_result

    def register_node(self, node_id: str, initial_position: _HasCoordinates) -> None:
        self._nodes[node_id] = NodePosition(
            id=node_id, x=initial_position.x, y=initial_position.y
        )
        logger.debug(
            "Registered node %s at (%s, %s)", node_id, initial_position.x, initial_position.y
        )
        self._update_canvas_elements()

    def unregister_node(self, node_id: str) -> None:
        # Drag state is kept; later updates for this id miss the position lookup.
        self._nodes.pop(node_id, None)
        logger.debug("Unregistered node %s", node_id)
        self._update_canvas_elements()

    def clear(self) -> None:
        self._nodes.clear()
        self._dragged_node_id = None
        self._update_canvas_elements()

    def handle_drag_start(self, event: DragStartEvent) -> None:
        if self._dragged_node_id is not None and self._dragged_node_id != event.id:
            logger.debug(
                "Drag start for %s replaces stale drag of %s", event.id, self._dragged_node_id
            )
        self._dragged_node_id = event.id

    def handle_drag_update(self, event: DragUpdateEvent) -> None:
        if self._dragged_node_id is None or self._dragged_node_id != event.id:
            logger.debug(
                "Discarding drag update for %s, active drag is %s",
                event.id,
                self._dragged_node_id,
            )
            return

        current = self._nodes.get(event.id)
        if current is None:
            logger.debug("Discarding drag update for unregistered node %s", event.id)
            return

        x = current.x + event.delta_x
        y = current.y + event.delta_y

        policy = self._grid_snap_provider.get_grid_snap_policy()
        if policy.snap_to_grid:
            if math.isfinite(policy.grid_size) and policy.grid_size > 0:
                x = snap_to_grid(x, policy.grid_size)
                y = snap_to_grid(y, policy.grid_size)
            else:
                logger.warning(
                    "Grid snapping skipped, grid size must be positive and finite: %s",
                    policy.grid_size,
                )

        position = NodePosition(id=event.id, x=x, y=y)
        self._nodes[event.id] = position
        self._update_canvas_elements()
        self._notify(event.id, position)

    def handle_drag_end(self) -> None:
        self._dragged_node_id = None

    def set_on_position_update(self, callback: PositionListener | None) -> None:
        self._listeners = [callback] if callback is not None else []

    def add_position_listener(self, callback: PositionListener) -> Callable[[], None]:
        self._listeners.append(callback)

        def unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    def get_node_position(self, node_id: str) -> NodePosition | None:
        return self._nodes.get(node_id)

    def get_all_node_positions(self) -> List[NodePosition]:
        return list(self._nodes.values())

    def get_visible_nodes(self) -> List[NodePosition]:
        area = self._tracker.get_visible_area()
        return [
            node
            for node in self._nodes.values()
            if is_element_visible(self._rectangle_for(node), area)
        ]

    def _notify(self, node_id: str, position: NodePosition) -> None:
        for listener in list(self._listeners):
            listener(node_id, position)

    def _rectangle_for(self, node: NodePosition) -> Rectangle:
        size = self._footprint(node.id)
        return Rectangle(x=node.x, y=node.y, width=size.width, height=size.height)

    def _update_canvas_elements(self) -> None:
        elements = [self._rectangle_for(node) for node in self._nodes.values()]
        self._last_result = self._tracker.update_elements(elements)
