"""Explicit application configuration and the saved-settings file."""
from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Dict, Optional

from supportlog.core.auth import Role, RoleDirectory
from supportlog.core.errors import ValidationError
from supportlog.core.utils import get_config_value, load_env_file

logger = logging.getLogger(__name__)

DEFAULT_TABLE = "support_records"
DEFAULT_SETTINGS_PATH = Path.home() / ".supportlog" / "settings.json"
DEFAULT_ENV_FILE = Path(".env")

URL_KEY = "store_url"
KEY_KEY = "store_key"


@dataclass(frozen=True)
class AppConfig:
    """Settings needed to build the store, controller and views."""

    store_url: str = ""
    store_key: str = ""
    table: str = DEFAULT_TABLE
    locale: str = "pt-BR"
    roles: Dict[str, Role] = field(default_factory=dict)
    settings_path: Path = DEFAULT_SETTINGS_PATH
    source: str = "default"

    @property
    def is_remote(self) -> bool:
        return bool(self.store_url and self.store_key)

    def role_directory(self) -> RoleDirectory:
        return RoleDirectory(self.roles)

    @classmethod
    def load(cls, settings_path: Optional[Path] = None, env_file: Path = DEFAULT_ENV_FILE) -> "AppConfig":
        """Read the environment (and Streamlit secrets), then apply saved settings."""

        load_env_file(env_file)
        path = settings_path or Path(
            os.getenv("SUPPORTLOG_SETTINGS_FILE", str(DEFAULT_SETTINGS_PATH))
        )
        config = cls(
            store_url=get_config_value("SUPABASE_URL").strip(),
            store_key=get_config_value("SUPABASE_ANON_KEY").strip(),
            table=get_config_value("SUPPORTLOG_TABLE", DEFAULT_TABLE) or DEFAULT_TABLE,
            locale=get_config_value("SUPPORTLOG_LOCALE", "pt-BR") or "pt-BR",
            roles=RoleDirectory.parse(get_config_value("SUPPORTLOG_ROLES")).assignments,
            settings_path=path,
        )
        if config.is_remote:
            config = replace(config, source="environment")

        saved = SettingsStore(path).load()
        if saved.get(URL_KEY) and saved.get(KEY_KEY):
            config = replace(
                config,
                store_url=saved[URL_KEY],
                store_key=saved[KEY_KEY],
                source="settings",
            )
        logger.info(
            "Configuration loaded from %s (%s store)",
            config.source,
            "remote" if config.is_remote else "in-memory",
        )
        return config


class SettingsStore:
    """Durable key-value storage for store credentials entered in the UI."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def load(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.warning("Could not read settings file %s: %s", self.path, exc)
            return {}
        return {key: str(value) for key, value in data.items()} if isinstance(data, dict) else {}

    def save(self, url: str, key: str) -> Dict[str, str]:
        url = url.strip()
        key = key.strip()
        if not url or not key:
            raise ValidationError(["URL e Key do banco"])
        if not url.startswith("http"):
            raise ValidationError(["URL iniciando com https://"])

        data = self.load()
        data.update({URL_KEY: url, KEY_KEY: key})
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, indent=2), encoding="utf-8")
        logger.info("Saved store settings to %s", self.path)
        return data

    def clear(self) -> None:
        data = self.load()
        data.pop(URL_KEY, None)
        data.pop(KEY_KEY, None)
        if data:
            self.path.write_text(json.dumps(data, indent=2), encoding="utf-8")
        elif self.path.exists():
            self.path.unlink()
        logger.info("Cleared store settings at %s", self.path)
