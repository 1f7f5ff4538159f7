from __future__ import annotations

import os
from typing import Callable

from ocmutil.common.config import resolve_gateway_url
from ocmutil.credentials import OCMConfig, load_ocm_config
from ocmutil.errors import ConfigurationError, OCMError
from ocmutil.logging import get_logger
from ocmutil.transport.connection import NOT_LOGGED_IN_MESSAGE, OCMConnection

logger = get_logger(__name__)

TOKEN_ENV_VAR = "OCM_TOKEN"
URL_ENV_VAR = "OCM_URL"
REFRESH_TOKEN_ENV_VAR = "OCM_REFRESH_TOKEN"

OCM_CONFIG_ERROR = (
    "Unable to load OCM config\n"
    "Login with 'ocm login' or set OCM_TOKEN, OCM_URL and OCM_REFRESH_TOKEN environment variables"
)

ConfigLoader = Callable[[], OCMConfig]


def get_ocm_configuration(loader: ConfigLoader = load_ocm_config) -> OCMConfig:
    """
    Combine the config file with the OCM_TOKEN, OCM_URL and OCM_REFRESH_TOKEN
    environment variables.

    The file is only read when at least one of the variables is missing, so
    users relying purely on the environment never need one. Variables that
    are set override the matching file values field by field.
    """
    token_env = os.environ.get(TOKEN_ENV_VAR, "")
    url_env = os.environ.get(URL_ENV_VAR, "")
    refresh_token_env = os.environ.get(REFRESH_TOKEN_ENV_VAR, "")

    config = OCMConfig()
    if not (token_env and url_env and refresh_token_env):
        try:
            config = loader() or OCMConfig()
        except OCMError as err:
            logger.debug("Config file load failed: %s", err)
            raise ConfigurationError("could not load OCM configuration file") from err

    if token_env:
        config.access_token = token_env
    if url_env:
        config.url = url_env
    if refresh_token_env:
        config.refresh_token = refresh_token_env

    return config


def create_connection(loader: ConfigLoader = load_ocm_config) -> OCMConnection:
    """Build an authenticated connection from the layered configuration.

    Besides access and refresh tokens, client credentials or a user and
    password from the config file are also enough to log in.
    """
    try:
        config = get_ocm_configuration(loader)
    except ConfigurationError as err:
        raise ConfigurationError(OCM_CONFIG_ERROR) from err

    if not config.url:
        raise ConfigurationError(OCM_CONFIG_ERROR)

    gateway_url = resolve_gateway_url(config.url)

    try:
        connection = OCMConnection.from_config(config, gateway_url)
    except ConfigurationError as err:
        if str(err) == NOT_LOGGED_IN_MESSAGE:
            raise ConfigurationError(OCM_CONFIG_ERROR) from err
        raise OCMError(f"failed to create OCM connection: {err}") from err

    logger.info("Created OCM connection to %s", gateway_url)
    return connection
