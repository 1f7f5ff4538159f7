import pytest

from ocmutil.errors import OCMError
from ocmutil.resources.accounts import get_account, get_subscription


class DummyConnection:
    def __init__(self, page: dict | None = None, error: Exception | None = None) -> None:
        self._page = page or {"items": [], "total": 0}
        self._error = error
        self.calls: list[dict] = []

    def list_items(self, path, *, search=None, size=None, params=None):
        self.calls.append({"path": path, "search": search, "size": size})
        if self._error:
            raise self._error
        return self._page


def test_get_subscription_returns_single_match():
    sub = {"id": "sub-1", "display_name": "my-cluster"}
    connection = DummyConnection({"items": [sub], "total": 1})

    assert get_subscription(connection, "my-cluster") == sub

    call = connection.calls[0]
    assert call["path"] == "/api/accounts_mgmt/v1/subscriptions"
    assert call["search"] == (
        "(display_name = 'my-cluster' or cluster_id = 'my-cluster' or "
        "external_cluster_id = 'my-cluster' or id = 'my-cluster')"
    )


@pytest.mark.parametrize("total", [0, 2])
def test_get_subscription_requires_exactly_one(total):
    connection = DummyConnection({"items": [{}] * total, "total": total})

    with pytest.raises(OCMError) as excinfo:
        get_subscription(connection, "abc")

    assert str(excinfo.value) == (
        f"there are {total} subscriptions with cluster identifier or name 'abc', expected 1"
    )


def test_get_subscription_wraps_api_errors():
    connection = DummyConnection(error=OCMError("GET failed: 500"))

    with pytest.raises(OCMError, match="can't retrieve subscription for key 'abc': GET failed: 500"):
        get_subscription(connection, "abc")


def test_get_account_by_username():
    account = {"id": "acc-1", "username": "jdoe"}
    connection = DummyConnection({"items": [account], "total": 1})

    assert get_account(connection, "jdoe") == account
    assert connection.calls[0]["path"] == "/api/accounts_mgmt/v1/accounts"
    assert connection.calls[0]["search"] == "(username = 'jdoe' or id = 'jdoe')"


def test_get_account_reports_count():
    connection = DummyConnection({"items": [{}, {}, {}], "total": 3})

    with pytest.raises(OCMError, match="there are 3 accounts with id or username 'jdoe', expected 1"):
        get_account(connection, "jdoe")


def test_get_account_wraps_api_errors():
    connection = DummyConnection(error=OCMError("boom"))

    with pytest.raises(OCMError, match="can't retrieve account for key 'jdoe': boom"):
        get_account(connection, "jdoe")
