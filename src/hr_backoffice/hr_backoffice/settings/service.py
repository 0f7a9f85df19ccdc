from __future__ import annotations

import logging
from dataclasses import fields, replace
from datetime import date
from typing import Optional

from ..core.exceptions import ConfigurationError, ValidationError
from .model import AttendanceSettings
from .repository import SettingsRepository

logger = logging.getLogger(__name__)

_EDITABLE = {f.name for f in fields(AttendanceSettings)} - {"settings_id"}


def require_period(settings: AttendanceSettings) -> tuple[date, date]:
    if not settings.has_period:
        raise ConfigurationError("Payroll period is not configured in attendance settings")
    return settings.period_start, settings.period_end


class SettingsService:
    def __init__(self, settings: SettingsRepository):
        self._settings = settings

    def get(self) -> AttendanceSettings:
        return self._settings.get_settings() or AttendanceSettings()

    def update(self, **changes) -> AttendanceSettings:
        unknown = set(changes) - _EDITABLE
        if unknown:
            raise ValidationError(f"Unknown settings: {', '.join(sorted(unknown))}")

        updated = replace(self.get(), **changes).validated()
        saved = self._settings.save_settings(updated)
        logger.info("Attendance settings updated: %s", ", ".join(sorted(changes)))
        return saved

    def advance_period(self, start: date, end: date, *, current: Optional[AttendanceSettings] = None) -> AttendanceSettings:
        base = current or self.get()
        updated = replace(base, period_start=start, period_end=end).validated()
        saved = self._settings.save_settings(updated)
        logger.info("Payroll period advanced to %s..%s", start, end)
        return saved
