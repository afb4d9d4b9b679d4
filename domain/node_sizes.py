from __future__ import annotations

from domain.models import NodeSize, Size

NODE_HEIGHT = 100.0
DEFAULT_NODE_SIZE = NodeSize.MEDIUM

_FOOTPRINT_BY_NODE_SIZE: dict[NodeSize, Size] = {
    NodeSize.SMALL: Size(150.0, NODE_HEIGHT),
    NodeSize.MEDIUM: Size(200.0, NODE_HEIGHT),
    NodeSize.LARGE: Size(300.0, NODE_HEIGHT),
}

DEFAULT_FOOTPRINT = _FOOTPRINT_BY_NODE_SIZE[DEFAULT_NODE_SIZE]


def normalize_node_size(value: NodeSize | str | None) -> NodeSize | None:
    if value is None:
        return None
    if isinstance(value, NodeSize):
        return value
    normalized = str(value).strip().lower()
    if not normalized:
        return None
    try:
        return NodeSize(normalized)
    except ValueError:
        return None


def footprint_for(size: NodeSize | str | None) -> Size:
    normalized = normalize_node_size(size) or DEFAULT_NODE_SIZE
    return _FOOTPRINT_BY_NODE_SIZE[normalized]
