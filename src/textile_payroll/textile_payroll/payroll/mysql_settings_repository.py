from __future__ import annotations

import json
from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone, load_json
from .settings_model import AllowanceRules, DeductionRules, PayrollSettings
from .settings_repository import PayrollSettingsRepository


class MySQLPayrollSettingsRepository(PayrollSettingsRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_active(self) -> Optional[PayrollSettings]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT settings_id, allowances_json, deductions_json
                FROM payroll_settings
                WHERE is_active=1
                ORDER BY settings_id DESC
                LIMIT 1
                """
            )
            r = fetchone(cur)
            if not r:
                return None
            return PayrollSettings(
                allowances=AllowanceRules.from_dict(load_json(r["allowances_json"], {})),
                deductions=DeductionRules.from_dict(load_json(r["deductions_json"], {})),
                settings_id=int(r["settings_id"]),
            )

    def save_active(self, settings: PayrollSettings) -> PayrollSettings:
        allowances = json.dumps(settings.allowances.to_dict())
        deductions = json.dumps(settings.deductions.to_dict())
        with db_cursor(self._conn_factory) as (_, cur):
            if settings.settings_id is not None:
                cur.execute(
                    "UPDATE payroll_settings SET allowances_json=%s, deductions_json=%s WHERE settings_id=%s",
                    (allowances, deductions, int(settings.settings_id)),
                )
                return settings
            cur.execute(
                "INSERT INTO payroll_settings(allowances_json, deductions_json, is_active) VALUES(%s,%s,1)",
                (allowances, deductions),
            )
            return PayrollSettings(
                allowances=settings.allowances,
                deductions=settings.deductions,
                settings_id=int(cur.lastrowid),
            )

    def delete_active(self) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM payroll_settings WHERE is_active=1")
