from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Set

from pydantic import BaseModel, Field, field_validator


class NodeSize(str, Enum):
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"


@dataclass(frozen=True)
class Point:
    x: float
    y: float


@dataclass(frozen=True)
class Size:
    width: float
    height: float


@dataclass(frozen=True)
class CanvasSize:
    width: float
    height: float


@dataclass(frozen=True)
class Rectangle:
    x: float
    y: float
    width: float
    height: float


@dataclass(frozen=True)
class Bounds:
    min_x: float
    max_x: float
    min_y: float
    max_y: float

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    def scaled(self, factor: float) -> Bounds:
        return Bounds(
            min_x=self.min_x * factor,
            max_x=self.max_x * factor,
            min_y=self.min_y * factor,
            max_y=self.max_y * factor,
        )


@dataclass(frozen=True)
class ScrollOffset:
    x: float = 0.0
    y: float = 0.0


@dataclass(frozen=True)
class OverflowResult:
    overflow: bool
    scroll: ScrollOffset
    zoom: float


@dataclass(frozen=True)
class NodePosition:
    id: str
    x: float
    y: float


@dataclass(frozen=True)
class DragStartEvent:
    id: str
    initial_x: float = 0.0
    initial_y: float = 0.0


@dataclass(frozen=True)
class DragUpdateEvent:
    id: str
    delta_x: float
    delta_y: float


@dataclass(frozen=True)
class GridSnapPolicy:
    snap_to_grid: bool = False
    grid_size: float = 20


class SceneCanvas(BaseModel):
    width: float = Field(..., ge=0)
    height: float = Field(..., ge=0)

    def to_canvas_size(self) -> CanvasSize:
        return CanvasSize(width=self.width, height=self.height)


class SceneNode(BaseModel):
    id: str = Field(..., min_length=1)
    x: float
    y: float
    size: Optional[NodeSize] = None


class SceneDocument(BaseModel):
    canvas: SceneCanvas
    zoom: Optional[float] = None
    nodes: List[SceneNode] = Field(default_factory=list)

    @field_validator("nodes", mode="after")
    @classmethod
    def ensure_unique_node_ids(cls, nodes: List[SceneNode]) -> List[SceneNode]:
        seen: Set[str] = set()
        for node in nodes:
            if node.id in seen:
                msg = f"Duplicate node id found: {node.id}"
                raise ValueError(msg)
            seen.add(node.id)
        return nodes

    def node_sizes(self) -> dict[str, NodeSize]:
        return {node.id: node.size for node in self.nodes if node.size is not None}
