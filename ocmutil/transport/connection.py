from __future__ import annotations

import base64
import json
import time
from typing import Any, Dict, Optional

import requests

from ocmutil.common.config import DEFAULT_CLIENT_ID, DEFAULT_SCOPES, DEFAULT_TOKEN_URL
from ocmutil.credentials.models import OCMConfig
from ocmutil.errors import ConfigurationError, OCMError
from ocmutil.logging import get_logger

logger = get_logger(__name__)

NOT_LOGGED_IN_MESSAGE = "Not logged in, run the 'ocm login' command"


class OCMConnection:
    """
    Authenticated connection to the OpenShift Cluster Manager REST API.

    Holds the gateway URL and the credentials needed to obtain a bearer
    token. Every call is a single blocking request; nothing is pooled,
    cached or retried.
    """

    REQUEST_TIMEOUT = 30
    # Tokens this close to expiry are exchanged before use.
    EXPIRY_LEEWAY_SEC = 60

    def __init__(
        self,
        url: str,
        *,
        access_token: str | None = None,
        refresh_token: str | None = None,
        client_id: str | None = None,
        client_secret: str | None = None,
        user: str | None = None,
        password: str | None = None,
        scopes: list[str] | None = None,
        token_url: str | None = None,
        insecure: bool = False,
    ) -> None:
        if not url:
            raise ValueError("Gateway URL is required to build a connection.")

        has_client_credentials = bool(client_id and client_secret)
        has_password = bool(user and password)
        if not (access_token or refresh_token or has_client_credentials or has_password):
            raise ConfigurationError(NOT_LOGGED_IN_MESSAGE)

        self._url = url.rstrip("/")
        self._access_token = access_token
        self._refresh_token = refresh_token
        self._client_id = client_id or DEFAULT_CLIENT_ID
        self._client_secret = client_secret
        self._user = user
        self._password = password
        self._scopes = list(scopes) if scopes else list(DEFAULT_SCOPES)
        self._token_url = token_url or DEFAULT_TOKEN_URL
        self._insecure = insecure

    @classmethod
    def from_config(cls, config: OCMConfig, url: str) -> "OCMConnection":
        """Build a connection from a loaded config and an already resolved gateway URL."""
        return cls(
            url,
            access_token=config.access_token,
            refresh_token=config.refresh_token,
            client_id=config.client_id,
            client_secret=config.client_secret,
            user=config.user,
            password=config.password,
            scopes=config.scopes,
            token_url=config.token_url,
            insecure=config.insecure,
        )

    @property
    def url(self) -> str:
        return self._url

    @property
    def tokens(self) -> tuple[str | None, str | None]:
        """Current (access, refresh) token pair, useful for persisting after an exchange."""
        return self._access_token, self._refresh_token

    def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """GET a resource below the gateway URL and return the decoded JSON body."""
        url = f"{self._url}/{path.lstrip('/')}"
        logger.debug("GET %s params=%s", url, params)

        try:
            resp = requests.get(
                url,
                headers={
                    "Authorization": f"Bearer {self._bearer_token()}",
                    "Accept": "application/json",
                },
                params=params,
                timeout=self.REQUEST_TIMEOUT,
                verify=not self._insecure,
            )
        except requests.RequestException as err:
            raise OCMError(f"request to {url} failed: {err}") from err

        if not 200 <= resp.status_code < 300:
            raise OCMError(f"GET {url} failed: {resp.status_code} {self._error_reason(resp)}")

        try:
            return resp.json()
        except ValueError as err:
            raise OCMError(f"GET {url} returned an invalid JSON body: {err}") from err

    def list_items(
        self,
        path: str,
        *,
        search: str | None = None,
        size: int | None = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """
        GET a collection, optionally filtered by a search expression.

        Returns the page as sent by the API, with 'items' and 'total'.
        """
        query: Dict[str, Any] = dict(params or {})
        if search is not None:
            query["search"] = search
        if size is not None:
            query["size"] = size

        page = self.get(path, params=query)
        page.setdefault("items", [])
        page.setdefault("total", len(page["items"]))
        return page

    def __enter__(self) -> "OCMConnection":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        # nothing to close (HTTP)
        return None

    # -------------------------
    # tokens
    # -------------------------

    def _bearer_token(self) -> str:
        if self._access_token and not self._is_expired(self._access_token):
            return self._access_token
        return self._request_token()

    def _request_token(self) -> str:
        data: Dict[str, str] = {
            "client_id": self._client_id,
            "scope": " ".join(self._scopes),
        }
        if self._refresh_token:
            data["grant_type"] = "refresh_token"
            data["refresh_token"] = self._refresh_token
            if self._client_secret:
                data["client_secret"] = self._client_secret
        elif self._client_secret:
            data["grant_type"] = "client_credentials"
            data["client_secret"] = self._client_secret
        elif self._user and self._password:
            data["grant_type"] = "password"
            data["username"] = self._user
            data["password"] = self._password
        else:
            raise OCMError("access token has expired and there are no credentials to request a new one")

        logger.info("Requesting access token from %s using %s grant", self._token_url, data["grant_type"])
        try:
            resp = requests.post(
                self._token_url,
                data=data,
                headers={"Accept": "application/json"},
                timeout=self.REQUEST_TIMEOUT,
                verify=not self._insecure,
            )
        except requests.RequestException as err:
            raise OCMError(f"can't request access token from {self._token_url}: {err}") from err

        if resp.status_code != 200:
            raise OCMError(
                f"can't request access token from {self._token_url}: {resp.status_code} {resp.text}"
            )

        try:
            body = resp.json()
        except ValueError as err:
            raise OCMError(f"token response from {self._token_url} is not valid JSON: {err}") from err

        access_token = body.get("access_token")
        if not access_token:
            raise OCMError(f"token response from {self._token_url} doesn't contain an access token")

        self._access_token = access_token
        if body.get("refresh_token"):
            self._refresh_token = body["refresh_token"]
        return access_token

    def _is_expired(self, token: str) -> bool:
        exp = self._token_expiry(token)
        if exp is None:
            return False
        return exp - self.EXPIRY_LEEWAY_SEC <= time.time()

    @staticmethod
    def _token_expiry(token: str) -> float | None:
        # Opaque tokens have no readable expiry and are used as they are.
        parts = token.split(".")
        if len(parts) != 3:
            return None
        payload = parts[1] + "=" * (-len(parts[1]) % 4)
        try:
            claims = json.loads(base64.urlsafe_b64decode(payload.encode("ascii")))
        except (ValueError, UnicodeError):
            return None
        exp = claims.get("exp") if isinstance(claims, dict) else None
        if isinstance(exp, (int, float)):
            return float(exp)
        return None

    @staticmethod
    def _error_reason(resp: requests.Response) -> str:
        try:
            body = resp.json()
        except ValueError:
            return resp.text
        if isinstance(body, dict) and body.get("reason"):
            return str(body["reason"])
        return resp.text
