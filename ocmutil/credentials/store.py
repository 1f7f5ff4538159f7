from __future__ import annotations

import json
import os
from pathlib import Path

import keyring
import keyring.core
from keyring.errors import KeyringError

from ocmutil.credentials.models import OCMConfig
from ocmutil.errors import ConfigurationError
from ocmutil.logging import get_logger
from ocmutil.runtime.paths import get_ocm_config_location

logger = get_logger(__name__)

KEYRING_ENV_VAR = "OCM_KEYRING"
KEYRING_SERVICE = "ocm"
KEYRING_USERNAME = "config"


class ConfigStore:
    """
    Reads and writes the OCM configuration.

    The config normally lives in a JSON file shared with the ocm CLI. When
    OCM_KEYRING is set the same JSON document is kept in the system keyring
    instead; the value is either a fully qualified keyring backend class or
    any other non-empty word to use the default backend.
    """

    def __init__(
        self,
        *,
        path: Path | str | None = None,
        keyring_backend: str | None = None,
    ) -> None:
        self._path = Path(path) if path is not None else None
        self._keyring_backend = keyring_backend if keyring_backend is not None else os.environ.get(KEYRING_ENV_VAR)

    @property
    def path(self) -> Path:
        if self._path is None:
            self._path = get_ocm_config_location()
        return self._path

    def uses_keyring(self) -> bool:
        return bool(self._keyring_backend)

    def load(self) -> OCMConfig:
        if self.uses_keyring():
            return self._load_from_keyring()

        cfg_file = self.path
        if not cfg_file.exists():
            logger.debug("Config file %s does not exist; using empty config.", cfg_file)
            return OCMConfig()

        try:
            data = cfg_file.read_text(encoding="utf-8")
        except UnicodeDecodeError as err:
            raise ConfigurationError(f"can't parse config file '{cfg_file}': {err}") from err
        except OSError as err:
            raise ConfigurationError(f"can't read config file '{cfg_file}': {err}") from err

        config = self._parse(data, source=f"config file '{cfg_file}'")
        logger.debug("Loaded config from %s", cfg_file)
        return config

    def save(self, config: OCMConfig) -> None:
        """Persist the config, as JSON, to the keyring or the config file."""
        payload = json.dumps(config.to_dict(), indent=2)

        if self.uses_keyring():
            backend = self._get_keyring()
            try:
                backend.set_password(KEYRING_SERVICE, KEYRING_USERNAME, payload)
            except KeyringError as err:
                raise ConfigurationError(f"can't write config to keyring: {err}") from err
            logger.info("Saved config to keyring backend %s", type(backend).__name__)
            return

        cfg_file = self.path
        try:
            cfg_file.parent.mkdir(parents=True, exist_ok=True)
            cfg_file.write_text(payload, encoding="utf-8")
            cfg_file.chmod(0o600)
        except OSError as err:
            raise ConfigurationError(f"can't write config file '{cfg_file}': {err}") from err
        logger.info("Saved config to %s", cfg_file)

    def _load_from_keyring(self) -> OCMConfig:
        backend = self._get_keyring()
        try:
            stored = backend.get_password(KEYRING_SERVICE, KEYRING_USERNAME)
        except KeyringError as err:
            raise ConfigurationError(f"can't read config from keyring: {err}") from err
        if not stored:
            logger.debug("No config found in keyring.")
            return OCMConfig()
        return self._parse(stored, source="keyring config")

    def _get_keyring(self):
        name = self._keyring_backend or ""
        try:
            if "." in name:
                backend = keyring.core.load_keyring(name)
            else:
                backend = keyring.get_keyring()
        except (ImportError, AttributeError, KeyringError) as err:
            raise ConfigurationError(f"keyring backend '{name}' is not available: {err}") from err

        priority = getattr(backend, "priority", None)
        if priority is not None and priority <= 0:
            raise ConfigurationError(f"keyring backend '{name}' is not available: no recommended keyring backend")
        return backend

    @staticmethod
    def _parse(data: str, *, source: str) -> OCMConfig:
        if not data.strip():
            return OCMConfig()
        try:
            parsed = json.loads(data)
        except json.JSONDecodeError as err:
            raise ConfigurationError(f"can't parse {source}: {err}") from err
        if not isinstance(parsed, dict):
            raise ConfigurationError(f"can't parse {source}: expected a JSON object")
        try:
            return OCMConfig.from_dict(parsed)
        except ValueError as err:
            raise ConfigurationError(f"can't parse {source}: {err}") from err


def load_ocm_config() -> OCMConfig:
    """Load the config from its default location."""
    return ConfigStore().load()
