from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from domain.models import NodeSize, Size
from domain.node_sizes import DEFAULT_NODE_SIZE, footprint_for, normalize_node_size
from domain.ports.canvas import NodeFootprint


class SizedNodeFootprint(NodeFootprint):
    """Per-node footprints fixed at construction.

    Sizes are copied in, so the rectangles already published for registered
    nodes stay in step with what this footprint reports.
    """

    def __init__(
        self,
        sizes: Mapping[str, NodeSize | str] | None = None,
        default_size: NodeSize | str = DEFAULT_NODE_SIZE,
    ) -> None:
        self._default_size = normalize_node_size(default_size) or DEFAULT_NODE_SIZE
        self._sizes: dict[str, NodeSize] = {}
        for node_id, size in (sizes or {}).items():
            normalized = normalize_node_size(size)
            if normalized is not None:
                self._sizes[node_id] = normalized

    @classmethod
    def from_settings(
        cls, settings: Any, sizes: Mapping[str, NodeSize | str] | None = None
    ) -> SizedNodeFootprint:
        return cls(sizes=sizes, default_size=settings.default_node_size)

    @property
    def default_size(self) -> NodeSize:
        return self._default_size

    def size_of(self, node_id: str) -> NodeSize:
        return self._sizes.get(node_id, self._default_size)

    def __call__(self, node_id: str) -> Size:
        return footprint_for(self.size_of(node_id))
