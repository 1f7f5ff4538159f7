"""Lookups against the accounts management service."""

from __future__ import annotations

from typing import Any, Dict

from ocmutil.errors import OCMError
from ocmutil.logging import get_logger
from ocmutil.transport.connection import OCMConnection

logger = get_logger(__name__)

AMS_API_BASE = "/api/accounts_mgmt/v1"
SUBSCRIPTIONS_PATH = f"{AMS_API_BASE}/subscriptions"
ACCOUNTS_PATH = f"{AMS_API_BASE}/accounts"


def get_subscription(connection: OCMConnection, key: str) -> Dict[str, Any]:
    """Return the single subscription whose display name, cluster id, external cluster id or id is `key`."""
    search = (
        f"(display_name = '{key}' or cluster_id = '{key}' or "
        f"external_cluster_id = '{key}' or id = '{key}')"
    )
    try:
        page = connection.list_items(SUBSCRIPTIONS_PATH, search=search)
    except OCMError as err:
        raise OCMError(f"can't retrieve subscription for key '{key}': {err}") from err

    total = page["total"]
    if total == 1:
        return page["items"][0]

    logger.debug("Subscription search %r matched %d records", search, total)
    raise OCMError(f"there are {total} subscriptions with cluster identifier or name '{key}', expected 1")


def get_account(connection: OCMConnection, key: str) -> Dict[str, Any]:
    """Return the single account whose username or id is `key`."""
    search = f"(username = '{key}' or id = '{key}')"
    try:
        page = connection.list_items(ACCOUNTS_PATH, search=search)
    except OCMError as err:
        raise OCMError(f"can't retrieve account for key '{key}': {err}") from err

    total = page["total"]
    if total == 1:
        return page["items"][0]

    logger.debug("Account search %r matched %d records", search, total)
    raise OCMError(f"there are {total} accounts with id or username '{key}', expected 1")
