from __future__ import annotations

from typing import Literal, Protocol

from ocmutil.errors import ConfigurationError

Environment = Literal["production", "stage", "integration"]

ENV_PRODUCTION: Environment = "production"
ENV_STAGE: Environment = "stage"
ENV_INTEGRATION: Environment = "integration"

PRODUCTION_URL = "https://api.openshift.com"
STAGING_URL = "https://api.stage.openshift.com"
INTEGRATION_URL = "https://api.integration.openshift.com"

DEFAULT_TOKEN_URL = "https://sso.redhat.com/auth/realms/redhat-external/protocol/openid-connect/token"
DEFAULT_CLIENT_ID = "cloud-services"
DEFAULT_SCOPES = ["openid"]

URL_ALIASES: dict[str, str] = {
    "production": PRODUCTION_URL,
    "prod": PRODUCTION_URL,
    "prd": PRODUCTION_URL,
    PRODUCTION_URL: PRODUCTION_URL,
    "staging": STAGING_URL,
    "stage": STAGING_URL,
    "stg": STAGING_URL,
    STAGING_URL: STAGING_URL,
    "integration": INTEGRATION_URL,
    "int": INTEGRATION_URL,
    INTEGRATION_URL: INTEGRATION_URL,
}


class HasURL(Protocol):
    @property
    def url(self) -> str: ...


def resolve_gateway_url(value: str) -> str:
    """Map an alias such as 'prod' or 'stg', or a known gateway URL, to the gateway URL."""
    try:
        return URL_ALIASES[value]
    except KeyError:
        raise ConfigurationError(
            f"Invalid OCM_URL found: {value}\n"
            "Valid URL aliases are: 'production', 'staging', 'integration'"
        ) from None


def get_current_env(connection: HasURL) -> Environment:
    url = connection.url
    if "stage" in url:
        return ENV_STAGE
    if "integration" in url:
        return ENV_INTEGRATION
    return ENV_PRODUCTION
