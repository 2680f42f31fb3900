"""Wires configuration, store, form and controller into one application."""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Optional

from supportlog.core.config import AppConfig, SettingsStore
from supportlog.forms.state import FormState
from supportlog.lifecycle.controller import MemoryClipboard, RecordLifecycleController
from supportlog.store import create_store
from supportlog.store.base import RecordStore

logger = logging.getLogger(__name__)


class Application:
    """Everything one operator session needs, rebuilt in place on reconfiguration."""

    def __init__(
        self,
        config: AppConfig,
        store_factory: Callable[[AppConfig], RecordStore] = create_store,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self.store_factory = store_factory
        self.form = FormState(clock=clock, locale=config.locale)
        self.clipboard = MemoryClipboard()
        self._build(config)

    def _build(self, config: AppConfig) -> None:
        self.config = config
        self.store = self.store_factory(config)
        self.form.locale = config.locale
        self.controller = RecordLifecycleController(
            self.store,
            self.form,
            clipboard=self.clipboard,
            roles=config.role_directory(),
            table=config.table,
        )
        self.controller.fetch_all()

    @property
    def settings(self) -> SettingsStore:
        return SettingsStore(self.config.settings_path)

    def reinitialize(self, config: Optional[AppConfig] = None) -> None:
        """Swap in a new configuration without restarting the process.

        The draft survives; history is reloaded from the newly selected store.
        """

        new_config = config or AppConfig.load(self.config.settings_path)
        logger.info(
            "Reinitializing with %s store",
            "remote" if new_config.is_remote else "in-memory",
        )
        self._build(new_config)

    def save_store_settings(self, url: str, key: str) -> None:
        self.settings.save(url, key)
        self.reinitialize()

    def clear_store_settings(self) -> None:
        """Forget saved credentials and fall back to whatever the environment provides."""

        self.settings.clear()
        self.reinitialize()
