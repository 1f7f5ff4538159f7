from __future__ import annotations

import re
from typing import Any, Dict

from ocmutil.errors import OCMError
from ocmutil.logging import get_logger
from ocmutil.resources.accounts import SUBSCRIPTIONS_PATH
from ocmutil.transport.connection import OCMConnection

logger = get_logger(__name__)

CS_API_BASE = "/api/clusters_mgmt/v1"
CLUSTERS_PATH = f"{CS_API_BASE}/clusters"

_CLUSTER_KEY_RE = re.compile(r"[\w-]+", re.ASCII)


def is_valid_cluster_key(cluster_key: str) -> bool:
    return _CLUSTER_KEY_RE.fullmatch(cluster_key) is not None


def get_cluster(connection: OCMConnection, cluster_id: str) -> Dict[str, Any]:
    """Return the single cluster whose id, name or external id is `cluster_id`."""
    return _search_cluster(connection, cluster_id, label="clusterId")


def get_active_cluster(connection: OCMConnection, key: str) -> Dict[str, Any]:
    """
    Resolve `key` to a cluster, going through its Reserved or Active subscription first.

    Clusters that don't report metrics have no external id in the accounts
    service, so when no subscription matches the clusters service is searched
    directly.
    """
    search = (
        f"(display_name = '{key}' or cluster_id = '{key}' or external_cluster_id = '{key}') and "
        "status in ('Reserved', 'Active')"
    )
    try:
        page = connection.list_items(SUBSCRIPTIONS_PATH, search=search, size=1)
    except OCMError as err:
        raise OCMError(f"can't retrieve subscription for key '{key}': {err}") from err

    total = page["total"]
    if total == 1:
        cluster_id = page["items"][0].get("cluster_id") if page["items"] else None
        if cluster_id:
            try:
                return connection.get(f"{CLUSTERS_PATH}/{cluster_id}")
            except OCMError as err:
                raise OCMError(f"can't retrieve cluster for key '{key}': {err}") from err

    if total > 1:
        raise OCMError(f"there are {total} subscriptions with cluster identifier or name '{key}'")

    logger.debug("No active subscription for %r; searching clusters directly", key)
    return _search_cluster(connection, key, label="key")


def is_cluster_ccs(connection: OCMConnection, cluster_id: str) -> bool:
    cluster = connection.get(f"{CLUSTERS_PATH}/{cluster_id}")
    return bool((cluster.get("ccs") or {}).get("enabled"))


def get_hive_shard(connection: OCMConnection, cluster_id: str) -> str:
    """Return the Hive server URL of the provision shard the cluster lives on."""
    shard = connection.get(f"{CLUSTERS_PATH}/{cluster_id}/provision_shard")

    server = ""
    if shard:
        server = (shard.get("hive_config") or {}).get("server") or ""

    if not server:
        raise OCMError(f"Unable to retrieve shard for cluster {cluster_id}")
    return server


def _search_cluster(connection: OCMConnection, key: str, *, label: str) -> Dict[str, Any]:
    search = f"id = '{key}' or name = '{key}' or external_id = '{key}'"
    try:
        page = connection.list_items(CLUSTERS_PATH, search=search, size=1)
    except OCMError as err:
        raise OCMError(f"can't retrieve clusters for {label} '{key}': {err}") from err

    total = page["total"]
    if total == 1:
        return page["items"][0]

    raise OCMError(f"there are {total} clusters with identifier or name '{key}', expected 1")
