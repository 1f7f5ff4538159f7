from .accounts import get_account, get_subscription
from .clusters import (
    get_active_cluster,
    get_cluster,
    get_hive_shard,
    is_cluster_ccs,
    is_valid_cluster_key,
)

__all__ = [
    "get_account",
    "get_subscription",
    "get_active_cluster",
    "get_cluster",
    "get_hive_shard",
    "is_cluster_ccs",
    "is_valid_cluster_key",
]
