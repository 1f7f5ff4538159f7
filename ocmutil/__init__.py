from ocmutil.client import create_connection, get_ocm_configuration
from ocmutil.common.config import ENV_INTEGRATION, ENV_PRODUCTION, ENV_STAGE, get_current_env
from ocmutil.credentials import ConfigStore, OCMConfig
from ocmutil.errors import ConfigurationError, OCMError
from ocmutil.resources import (
    get_account,
    get_active_cluster,
    get_cluster,
    get_hive_shard,
    get_subscription,
    is_cluster_ccs,
    is_valid_cluster_key,
)
from ocmutil.transport import OCMConnection

__all__ = [
    "ConfigStore",
    "ConfigurationError",
    "ENV_INTEGRATION",
    "ENV_PRODUCTION",
    "ENV_STAGE",
    "OCMConfig",
    "OCMConnection",
    "OCMError",
    "create_connection",
    "get_account",
    "get_active_cluster",
    "get_cluster",
    "get_current_env",
    "get_hive_shard",
    "get_ocm_configuration",
    "get_subscription",
    "is_cluster_ccs",
    "is_valid_cluster_key",
]
