import json
import logging
import os
from dataclasses import dataclass
from typing import Optional

from .errors import ConfigError

log = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = os.getenv(
    "RIVALSTRMNL_CONFIG",
    "/data/rivalstrmnl.config",
)

DEFAULT_API_BASE = "https://marvelrivalsapi.com/api/v1"
DEFAULT_WEBHOOK_BASE = "https://usetrmnl.com/api"
DEFAULT_TIMEOUT = 30
# TRMNL accepts one custom plugin update per five minutes.
DEFAULT_PUBLISH_DELAY = 305
DEFAULT_REFRESH_COOLDOWN = 600
DEFAULT_STALE_AFTER = 3600

# setting name -> (environment variable, config file key)
_SOURCES = {
    "plugin_id": ("TRMNL_PLUGIN_ID", "trmnl_plugin_id"),
    "api_key": ("RIVALS_API_KEY", "api_key"),
    "username": ("RIVALS_USERNAME", "username"),
    "api_base": ("RIVALSTRMNL_API_BASE", "api_base"),
    "webhook_base": ("RIVALSTRMNL_WEBHOOK_BASE", "webhook_base"),
    "timeout": ("RIVALSTRMNL_TIMEOUT", "timeout"),
    "publish_delay": ("RIVALSTRMNL_PUBLISH_DELAY", "publish_delay"),
    "refresh_cooldown": ("RIVALSTRMNL_REFRESH_COOLDOWN", "refresh_cooldown"),
}

REQUIRED = ("plugin_id", "api_key", "username")


@dataclass
class Settings:
    plugin_id: str
    api_key: str
    username: str
    api_base: str = DEFAULT_API_BASE
    webhook_base: str = DEFAULT_WEBHOOK_BASE
    timeout: float = DEFAULT_TIMEOUT
    publish_delay: float = DEFAULT_PUBLISH_DELAY
    refresh_cooldown: float = DEFAULT_REFRESH_COOLDOWN
    stale_after: float = DEFAULT_STALE_AFTER
    dry_run: bool = False


def load_config() -> dict:
    """
    Load the optional JSON configuration file.

    A missing or unreadable file yields an empty dict; environment variables
    and command-line arguments still apply.
    """
    try:
        with open(DEFAULT_CONFIG_PATH, "r", encoding="utf-8") as f:
            return json.load(f)
    except FileNotFoundError:
        log.debug("Config file not found: %s", DEFAULT_CONFIG_PATH)
        return {}
    except Exception:
        log.exception("Failed to load config")
        return {}


def _number(name: str, value) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ConfigError(f"{name} must be a number, got {value!r}") from None


def load_settings(overrides: Optional[dict] = None, *, dry_run: bool = False) -> Settings:
    """Resolve run settings from overrides, then environment, then config file.

    Raises ConfigError listing every missing mandatory parameter.
    """
    overrides = overrides or {}
    cfg = load_config()

    resolved = {}
    for name, (env_var, cfg_key) in _SOURCES.items():
        value = overrides.get(name)
        if value in (None, ""):
            value = os.getenv(env_var)
        if value in (None, ""):
            value = cfg.get(cfg_key)
        if value not in (None, ""):
            resolved[name] = value

    missing = [name for name in REQUIRED if not resolved.get(name)]
    if missing:
        raise ConfigError("Missing required parameter(s): " + ", ".join(missing))

    for name in ("timeout", "publish_delay", "refresh_cooldown"):
        if name in resolved:
            resolved[name] = _number(name, resolved[name])

    for name in REQUIRED:
        resolved[name] = str(resolved[name]).strip()

    return Settings(dry_run=dry_run, **resolved)
