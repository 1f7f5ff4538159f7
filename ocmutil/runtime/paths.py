from __future__ import annotations

import os
from pathlib import Path

from platformdirs import user_config_dir

from ocmutil.errors import ConfigurationError

APP_NAME = "ocm"
CONFIG_FILENAME = "ocm.json"
LEGACY_CONFIG_FILENAME = ".ocm.json"
CONFIG_ENV_VAR = "OCM_CONFIG"


def get_ocm_config_location() -> Path:
    """
    Resolve where the OCM config file lives.

    OCM_CONFIG wins when set. Otherwise the legacy ~/.ocm.json is used if it
    exists, and the per-user config directory from platformdirs if it doesn't.
    """
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return Path(override)

    try:
        home = Path.home()
    except RuntimeError as err:
        raise ConfigurationError(f"can't determine home directory: {err}") from err

    legacy_path = home / LEGACY_CONFIG_FILENAME
    if legacy_path.exists():
        return legacy_path

    return Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME
