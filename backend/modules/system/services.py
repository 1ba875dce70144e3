"""
modules/system/services.py - Cost settings stored in system_config.

Settings live as one JSON document under the "cost_settings" key and are
merged over the defaults on every read, so a partially stored document (or
none at all) always yields a complete snapshot.
"""

import logging
from typing import Any

from pydantic import ValidationError
from sqlalchemy.orm import Session

from core.db import unit_of_work
from core.errors import ValidationFailed
from core.interfaces.settings_provider import SettingsProvider
from core.models import SystemConfig
from core.schemas import CostSettings, CostSettingsUpdate

log = logging.getLogger("printdesk.api")

COST_SETTINGS_KEY = "cost_settings"

DEFAULT_COST_SETTINGS = CostSettings().model_dump()


def get_config_value(db: Session, key: str, default: Any = None) -> Any:
    row = db.query(SystemConfig).filter(SystemConfig.key == key).first()
    return row.value if row else default


def set_config_value(db: Session, key: str, value: Any) -> None:
    """Upsert a system_config row. Caller commits."""
    row = db.query(SystemConfig).filter(SystemConfig.key == key).first()
    if row:
        row.value = value
    else:
        db.add(SystemConfig(key=key, value=value))


class SettingsService(SettingsProvider):

    def get_settings(self, db: Session) -> CostSettings:
        stored = get_config_value(db, COST_SETTINGS_KEY, {}) or {}
        return CostSettings(**{**DEFAULT_COST_SETTINGS, **stored})

    def update_settings(self, db: Session, data: CostSettingsUpdate) -> CostSettings:
        """Merge the given fields into the stored settings."""
        current = self.get_settings(db).model_dump()
        try:
            merged = CostSettings(**{**current, **data.model_dump(exclude_unset=True)})
        except ValidationError as e:
            raise ValidationFailed("Invalid settings", errors=e.errors(include_url=False)) from e
        with unit_of_work(db):
            set_config_value(db, COST_SETTINGS_KEY, merged.model_dump())
        log.info(f"Cost settings updated: {sorted(data.model_dump(exclude_unset=True))}")
        return merged


settings_provider = SettingsService()
