from __future__ import annotations

from typing import Optional, Protocol

from .model import AttendanceSettings


class SettingsRepository(Protocol):
    def get_settings(self) -> Optional[AttendanceSettings]:
        raise NotImplementedError

    def save_settings(self, settings: AttendanceSettings) -> AttendanceSettings:
        """Insert the singleton row or update it; returns the stored value."""

        raise NotImplementedError
