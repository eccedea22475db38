from __future__ import annotations

import json
import logging

from pydantic import ValidationError

from ..schemas.app_settings import DEFAULT_TARGET_HOURS, AppSettings
from .local_store import LocalStore

logger = logging.getLogger(__name__)

SETTINGS_KEY = "ojt_settings"


class AppSettingsStore:
    """Synchronous load/save of ``AppSettings`` in the local store."""

    def __init__(self, store: LocalStore, default_target_hours: float = DEFAULT_TARGET_HOURS) -> None:
        self.store = store
        self.default_target_hours = default_target_hours

    def _defaults(self) -> AppSettings:
        return AppSettings(target_hours=self.default_target_hours)

    def load(self) -> AppSettings:
        raw = self.store.get_item(SETTINGS_KEY)
        if not raw:
            return self._defaults()
        try:
            return AppSettings.model_validate_json(raw)
        except ValidationError:
            logger.warning("settings.invalid_stored_value")
            return self._defaults()

    def save(self, app_settings: AppSettings) -> AppSettings:
        self.store.set_item(SETTINGS_KEY, json.dumps(app_settings.model_dump(by_alias=True)))
        return app_settings
