"""
Viewer configuration.

Defaults live as module-level constants; an optional YAML file and then the
command-line flags override them.
"""

from dataclasses import dataclass, replace
from pathlib import Path

import pytz
import yaml

# ---------------- CONFIG - DEFAULT VALUES ----------------
DEFAULT_TIMEZONE = "US/Eastern"
DEFAULT_TIME_FORMAT = "%H:%M:%S"
DEFAULT_STORE_DIR = "~/.artillery-viewer"
DEFAULT_TITLE = "Artillery Report Viewer"

STORAGE_KEY = "artillery-reports"

CONFIG_KEYS = ("timezone", "time_format", "store_dir", "title")


@dataclass(frozen=True)
class ViewerConfig:
    timezone: str = DEFAULT_TIMEZONE
    time_format: str = DEFAULT_TIME_FORMAT
    store_dir: str = DEFAULT_STORE_DIR
    title: str = DEFAULT_TITLE

    @property
    def tz(self):
        return resolve_timezone(self.timezone)

    @property
    def store_path(self):
        return Path(self.store_dir).expanduser()


def resolve_timezone(name):
    """Return the pytz timezone for `name`, falling back to the default zone."""
    try:
        return pytz.timezone(name)
    except pytz.UnknownTimeZoneError:
        print(f"⚠️ Warning: Unknown timezone '{name}'. Using {DEFAULT_TIMEZONE}.")
        return pytz.timezone(DEFAULT_TIMEZONE)


def load_config(path=None, **overrides):
    """
    Build a ViewerConfig from the defaults, an optional YAML file and overrides.

    Unreadable or malformed YAML is reported and ignored. Overrides whose value
    is None (flags the user did not pass) are skipped.
    """
    config = ViewerConfig()

    if path:
        config_path = Path(path).expanduser().resolve()
        if not config_path.exists():
            print(f"⚠️ Warning: Config file '{config_path}' not found.")
        else:
            try:
                with open(config_path, "r", encoding="utf-8") as f:
                    config_yaml = yaml.safe_load(f) or {}
            except (OSError, yaml.YAMLError) as e:
                print(f"⚠️ Could not read YAML config: {e}")
                config_yaml = {}

            if not isinstance(config_yaml, dict):
                print("⚠️ Warning: YAML config must be a mapping. Ignoring it.")
                config_yaml = {}

            values = {k: str(v) for k, v in config_yaml.items() if k in CONFIG_KEYS and v is not None}
            unknown = sorted(set(config_yaml) - set(CONFIG_KEYS))
            if unknown:
                print(f"⚠️ Warning: Ignoring unknown config keys: {', '.join(map(str, unknown))}")
            config = replace(config, **values)

    values = {k: v for k, v in overrides.items() if k in CONFIG_KEYS and v is not None}
    return replace(config, **values)
