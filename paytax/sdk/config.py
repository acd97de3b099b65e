"""Configuration management for paytax.

settings.json holds machine-specific settings:
   - rules_url: base URL of the remote rule service (dynamic rules)
   - rules_api_key: bearer token for the rule service
   - rules_dir: directory of {year}.yaml rule files (used when no rules_url)
   - fetch_timeout: seconds to wait for dynamic rules before falling back
   - jurisdiction: state code the engine computes state taxes for

Config directory resolution:
1. PAYTAX_CONFIG_PATH environment variable (if set)
2. ~/.config/paytax/ (XDG_CONFIG_HOME fallback)

Environment variables override settings.json values:
PAYTAX_RULES_URL, PAYTAX_RULES_API_KEY, PAYTAX_RULES_DIR,
PAYTAX_FETCH_TIMEOUT, PAYTAX_JURISDICTION.
"""

import json
import os
from pathlib import Path
from typing import Any, Optional

from .errors import ConfigurationError
from .rules.files import FileRuleProvider
from .rules.provider import RuleProvider
from .rules.remote import HttpRuleProvider


APP_NAME = "paytax"
SETTINGS_FILENAME = "settings.json"

DEFAULT_FETCH_TIMEOUT = 5.0
DEFAULT_JURISDICTION = "CA"

SETTING_KEYS = {
    "rules_url": "PAYTAX_RULES_URL",
    "rules_api_key": "PAYTAX_RULES_API_KEY",
    "rules_dir": "PAYTAX_RULES_DIR",
    "fetch_timeout": "PAYTAX_FETCH_TIMEOUT",
    "jurisdiction": "PAYTAX_JURISDICTION",
}


def get_config_dir() -> Path:
    """Get the configuration directory path.

    Resolution order:
    1. PAYTAX_CONFIG_PATH environment variable
    2. ~/.config/paytax/ (XDG_CONFIG_HOME)
    """
    env_path = os.environ.get("PAYTAX_CONFIG_PATH")
    if env_path:
        return Path(env_path)

    xdg_config_home = os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config")
    return Path(xdg_config_home) / APP_NAME


def get_settings_path() -> Path:
    """Get the path to settings.json (may not exist yet)."""
    return get_config_dir() / SETTINGS_FILENAME


def load_settings() -> dict:
    """Load settings from settings.json.

    Returns:
        Settings dictionary (empty dict if file doesn't exist)

    Raises:
        ConfigurationError: If the file exists but is not a JSON object
    """
    settings_file = get_settings_path()

    if not settings_file.exists():
        return {}

    try:
        with open(settings_file, "r") as f:
            settings = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid JSON in {settings_file}: {e}") from e

    if not isinstance(settings, dict):
        raise ConfigurationError(
            f"{settings_file} must contain a JSON object, found {type(settings).__name__}"
        )
    return settings


def save_settings(settings: dict) -> Path:
    """Save settings to settings.json and return its path."""
    config_dir = get_config_dir()
    config_dir.mkdir(parents=True, exist_ok=True)

    settings_file = config_dir / SETTINGS_FILENAME

    with open(settings_file, "w") as f:
        json.dump(settings, f, indent=2)

    return settings_file


def get_setting(key: str, default: Any = None) -> Any:
    """Get an effective setting: environment override, then settings.json, then default."""
    env_var = SETTING_KEYS.get(key)
    if env_var and os.environ.get(env_var):
        return os.environ[env_var]
    return load_settings().get(key, default)


def set_setting(key: str, value: Any) -> Path:
    """Set a setting value in settings.json.

    Raises:
        ConfigurationError: If the key is unknown or the value is invalid
    """
    if key not in SETTING_KEYS:
        raise ConfigurationError(
            f"Unknown setting '{key}'. Valid settings: {', '.join(sorted(SETTING_KEYS))}"
        )
    if key == "fetch_timeout":
        value = _parse_timeout(value)
    if key == "jurisdiction":
        value = str(value).strip().upper()

    settings = load_settings()
    settings[key] = value
    return save_settings(settings)


def unset_setting(key: str) -> bool:
    """Remove a setting from settings.json. Returns True if it was set."""
    settings = load_settings()
    if key not in settings:
        return False
    del settings[key]
    save_settings(settings)
    return True


def _parse_timeout(value: Any) -> float:
    try:
        timeout = float(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"fetch_timeout must be a number of seconds, got '{value}'") from None
    if timeout <= 0:
        raise ConfigurationError(f"fetch_timeout must be positive, got {timeout}")
    return timeout


def get_fetch_timeout() -> float:
    return _parse_timeout(get_setting("fetch_timeout", DEFAULT_FETCH_TIMEOUT))


def get_jurisdiction() -> str:
    return str(get_setting("jurisdiction", DEFAULT_JURISDICTION)).strip().upper()


def build_provider() -> Optional[RuleProvider]:
    """Build the dynamic RuleProvider described by the current settings.

    Returns:
        HttpRuleProvider if rules_url is set, else FileRuleProvider if
        rules_dir is set, else None (engine uses embedded rules only)
    """
    rules_url = get_setting("rules_url")
    if rules_url:
        return HttpRuleProvider(
            rules_url,
            api_key=get_setting("rules_api_key"),
            timeout=get_fetch_timeout(),
        )

    rules_dir = get_setting("rules_dir")
    if rules_dir:
        return FileRuleProvider(rules_dir)

    return None
