from __future__ import annotations

from dataclasses import replace
from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_date, db_cursor, fetchone
from .model import AttendanceSettings
from .repository import SettingsRepository

_COLUMNS = (
    "time_in_start",
    "time_in_end",
    "time_out_start",
    "time_out_end",
    "period_start",
    "period_end",
    "auto_mark_absent",
    "auto_mark_late",
)


def _row_to_settings(r: dict) -> AttendanceSettings:
    return AttendanceSettings(
        settings_id=int(r["settings_id"]),
        time_in_start=r.get("time_in_start"),
        time_in_end=r.get("time_in_end"),
        time_out_start=r.get("time_out_start"),
        time_out_end=r.get("time_out_end"),
        period_start=as_date(r.get("period_start")),
        period_end=as_date(r.get("period_end")),
        auto_mark_absent=bool(r.get("auto_mark_absent")),
        auto_mark_late=bool(r.get("auto_mark_late")),
    )


class MySQLSettingsRepository(SettingsRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_settings(self) -> Optional[AttendanceSettings]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT settings_id, {", ".join(_COLUMNS)}
                FROM attendance_settings
                ORDER BY settings_id ASC
                LIMIT 1
                """
            )
            r = fetchone(cur)
            return _row_to_settings(r) if r else None

    def save_settings(self, settings: AttendanceSettings) -> AttendanceSettings:
        values = tuple(getattr(settings, c) for c in _COLUMNS)
        existing = settings.settings_id
        if existing is None:
            current = self.get_settings()
            existing = current.settings_id if current else None

        with db_cursor(self._conn_factory) as (_, cur):
            if existing is None:
                cur.execute(
                    f"""
                    INSERT INTO attendance_settings({", ".join(_COLUMNS)})
                    VALUES({", ".join(["%s"] * len(_COLUMNS))})
                    """,
                    values,
                )
                existing = int(cur.lastrowid)
            else:
                assignments = ", ".join(f"{c}=%s" for c in _COLUMNS)
                cur.execute(
                    f"UPDATE attendance_settings SET {assignments} WHERE settings_id=%s",
                    values + (int(existing),),
                )

        return replace(settings, settings_id=int(existing))
