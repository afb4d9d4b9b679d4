from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Protocol

from domain.models import GridSnapPolicy, NodePosition, SceneDocument, Size

PositionListener = Callable[[str, NodePosition], None]


class GridSnapPolicyProvider(Protocol):
    def get_grid_snap_policy(self) -> GridSnapPolicy: ...


class NodeFootprint(Protocol):
    def __call__(self, node_id: str) -> Size: ...


class SceneRepository(Protocol):
    def load(self, path: Path) -> SceneDocument: ...
