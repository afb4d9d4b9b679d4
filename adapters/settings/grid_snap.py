from __future__ import annotations

from typing import Any

from domain.models import GridSnapPolicy
from domain.ports.canvas import GridSnapPolicyProvider


class SettingsGridSnapPolicyProvider(GridSnapPolicyProvider):
    """Reads the snap policy from live settings on every call.

    The settings object is not copied, so toggling ``snap_to_grid`` on it is
    picked up by the next drag update.
    """

    def __init__(self, settings: Any) -> None:
        self._settings = settings

    @classmethod
    def from_settings(cls, settings: Any) -> SettingsGridSnapPolicyProvider:
        return cls(settings)

    def get_grid_snap_policy(self) -> GridSnapPolicy:
        return GridSnapPolicy(
            snap_to_grid=bool(self._settings.snap_to_grid),
            grid_size=self._settings.grid_size,
        )
