from __future__ import annotations

from pathlib import Path

from domain.models import SceneDocument
from domain.ports.canvas import SceneRepository


class FileSystemSceneRepository(SceneRepository):
    def load(self, path: Path) -> SceneDocument:
        if not path.exists():
            msg = f"Scene file not found: {path}"
            raise FileNotFoundError(msg)
        return SceneDocument.model_validate_json(path.read_bytes())
