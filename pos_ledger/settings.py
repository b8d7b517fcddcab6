"""Holder for the single process-wide AppSettings value."""

from __future__ import annotations

from typing import Callable

import structlog

from pos_ledger.config import DEFAULT_APP_NAME
from pos_ledger.models import AppSettings

logger = structlog.get_logger(__name__)


def default_settings() -> AppSettings:
    return AppSettings(app_name=DEFAULT_APP_NAME)


class SettingsStore:
    def __init__(
        self,
        settings: AppSettings | None = None,
        on_change: Callable[[], None] | None = None,
    ) -> None:
        self._settings = settings or default_settings()
        self.on_change = on_change

    def current(self) -> AppSettings:
        return self._settings

    def rename(self, app_name: str) -> AppSettings:
        self._settings = AppSettings(app_name=app_name)
        logger.info("settings_app_renamed", app_name=app_name)
        self._changed()
        return self._settings

    def replace(self, settings: AppSettings) -> None:
        self._settings = settings
        logger.info("settings_replaced", app_name=settings.app_name)
        self._changed()

    def _changed(self) -> None:
        if self.on_change is not None:
            self.on_change()
