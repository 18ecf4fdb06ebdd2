import copy
import json
import os
from typing import Any, Dict, Mapping, Optional

from dotenv import load_dotenv

from constants import DEFAULT_REDIRECT_URI, DEFAULT_SCOPES
from spotify_api.errors import ConfigError

CONFIG_PATH = "config.json"

# Default configuration values
DEFAULT_CONFIG = {
    # Spotify app credentials. Normally supplied through CLIENT_ID / CLIENT_SECRET.
    "spotify_client_id": "",
    "spotify_client_secret": "",
    "spotify_redirect_uri": DEFAULT_REDIRECT_URI,
    "spotify_scopes": list(DEFAULT_SCOPES),
    "spotify_show_dialog": False,

    # How long to wait for the browser redirect before giving up on an attempt.
    "auth_timeout_seconds": 300,
    "http_timeout_seconds": 30,
    "open_browser": True,

    # CSV exports
    "export_dir": os.path.join("~", "Downloads"),
}

# Environment variable -> config key. Environment wins over config.json.
ENV_OVERRIDES = {
    "CLIENT_ID": "spotify_client_id",
    "CLIENT_SECRET": "spotify_client_secret",
    "SPOTIFY_REDIRECT_URI": "spotify_redirect_uri",
    "PLAYLIST_EXPORT_DIR": "export_dir",
}

# Validation rules for config fields
CONFIG_SCHEMA = {
    "spotify_client_id": {"type": str, "required": False},
    "spotify_client_secret": {"type": str, "required": False},
    "spotify_redirect_uri": {"type": str, "required": True},
    "spotify_scopes": {"type": list, "required": True, "element_type": str},
    "spotify_show_dialog": {"type": bool, "required": False},
    "auth_timeout_seconds": {"type": (int, float), "required": False, "min": 1, "max": 3600},
    "http_timeout_seconds": {"type": (int, float), "required": False, "min": 1, "max": 300},
    "open_browser": {"type": bool, "required": False},
    "export_dir": {"type": str, "required": True},
}


def load_config(path: str = CONFIG_PATH, *, env: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
    """Build the runtime config: defaults, then config.json (optional), then environment.

    When `env` is None the process environment is used, after loading a .env file.
    Raises ConfigError on unreadable JSON or values that fail validation.
    """

    config = copy.deepcopy(DEFAULT_CONFIG)

    if path and os.path.exists(path):
        try:
            with open(path, "r", encoding="utf-8") as f:
                file_config = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Config file {path} contains invalid JSON: {e}") from e
        if not isinstance(file_config, dict):
            raise ConfigError(f"Config file {path} must contain a JSON object.")
        config.update(file_config)

    if env is None:
        load_dotenv()
        env = os.environ

    for env_key, config_key in ENV_OVERRIDES.items():
        value = env.get(env_key)
        if value is not None and value.strip():
            config[config_key] = value.strip()

    is_valid, errors = validate_config(config)
    if not is_valid:
        raise ConfigError("Invalid configuration:\n- " + "\n- ".join(errors))

    return config


def validate_config(config: Dict[str, Any]) -> tuple[bool, list[str]]:
    """
    Validate configuration against schema.
    Returns (is_valid, list_of_errors).
    """
    errors = []

    for key, rules in CONFIG_SCHEMA.items():
        # Check required fields
        if rules.get("required", False) and key not in config:
            errors.append(f"Missing required field: {key}")
            continue

        if key not in config:
            continue

        value = config[key]

        # Type check (bool is an int subclass; don't let True pass as a number)
        expected_type = rules.get("type")
        wrong_bool = isinstance(value, bool) and expected_type is not bool
        if expected_type and (wrong_bool or not isinstance(value, expected_type)):
            type_names = expected_type.__name__ if not isinstance(expected_type, tuple) else "/".join(t.__name__ for t in expected_type)
            errors.append(f"Field '{key}' must be {type_names}, got {type(value).__name__}")
            continue

        if isinstance(value, list) and "element_type" in rules:
            elem_type = rules["element_type"]
            bad_elems = [v for v in value if not isinstance(v, elem_type)]
            if bad_elems:
                errors.append(
                    f"Field '{key}' must be a list of {elem_type.__name__}, got invalid elements: {bad_elems}"
                )
                continue

        # Range check for numeric values
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            if "min" in rules and value < rules["min"]:
                errors.append(f"Field '{key}' must be >= {rules['min']}, got {value}")
            if "max" in rules and value > rules["max"]:
                errors.append(f"Field '{key}' must be <= {rules['max']}, got {value}")

    return len(errors) == 0, errors


def resolve_export_dir(config: Dict[str, Any]) -> str:
    """Return the absolute export directory (expands ~ and environment variables)."""
    raw = str(config.get("export_dir") or DEFAULT_CONFIG["export_dir"])
    return os.path.abspath(os.path.expanduser(os.path.expandvars(raw)))
