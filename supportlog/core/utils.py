"""Shared utility functions for the supportlog package."""
import logging
import os
from datetime import datetime, timezone
from pathlib import Path

logger = logging.getLogger(__name__)

INPUT_DATETIME_FORMAT = "%Y-%m-%dT%H:%M"

DISPLAY_FORMATS = {
    "pt-BR": "%d/%m/%Y, %H:%M:%S",
    "en-US": "%m/%d/%Y, %I:%M:%S %p",
}


def get_config_value(key: str, default: str = "") -> str:
    """Get configuration value from Streamlit secrets or environment variables.

    Checks Streamlit secrets first (for cloud deployment), then falls back
    to environment variables (for local development).
    """
    try:
        import streamlit as st
        if hasattr(st, "secrets") and key in st.secrets:
            return str(st.secrets[key])
    except ImportError:
        pass
    except Exception as exc:  # missing secrets.toml raises version-specific errors
        logger.debug("Streamlit secrets unavailable for %s: %s", key, exc)

    return os.getenv(key, default)


def load_env_file(path: Path) -> None:
    """Load environment variables from a file if it exists."""
    if not path.exists():
        return

    try:
        with path.open(encoding="utf-8") as handle:
            for raw_line in handle:
                line = raw_line.strip()
                if not line or line.startswith("#") or "=" not in line:
                    continue
                key, value = line.split("=", 1)
                key = key.strip()
                if not key or key in os.environ:
                    continue
                os.environ[key] = value.strip().strip('"').strip("'")
    except OSError as exc:
        logger.debug("Could not load env file %s: %s", path, exc)


def format_input_datetime(value: datetime | None = None) -> str:
    """Return the ``YYYY-MM-DDTHH:MM`` string used by the datetime inputs."""

    return (value or datetime.now()).strftime(INPUT_DATETIME_FORMAT)


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _parse_datetime(raw: str) -> datetime | None:
    text = raw.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        pass
    for fmt in (INPUT_DATETIME_FORMAT, "%Y-%m-%d %H:%M", "%Y-%m-%d"):
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    return None


def format_display_date(raw: str | None, locale: str = "pt-BR") -> str:
    """Render a stored timestamp for humans; empty or invalid input gives ``""``."""

    if not raw:
        return ""
    parsed = _parse_datetime(str(raw))
    if parsed is None:
        logger.debug("Ignoring unparseable timestamp %r", raw)
        return ""
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone()
    return parsed.strftime(DISPLAY_FORMATS.get(locale, DISPLAY_FORMATS["pt-BR"]))
