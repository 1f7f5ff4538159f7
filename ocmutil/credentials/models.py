from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Mapping


@dataclass(slots=True)
class OCMConfig:
    # Tokens
    access_token: str | None = None
    refresh_token: str | None = None

    # OpenID client / user credentials
    client_id: str | None = None
    client_secret: str | None = None
    user: str | None = None
    password: str | None = None
    scopes: list[str] | None = None
    token_url: str | None = None

    # Gateway, either the complete URL or an alias such as 'production'
    url: str | None = None
    insecure: bool = False

    # Pager command, for example 'less'
    pager: str | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> "OCMConfig":
        """Build a config from the JSON object stored in ocm.json.

        Unknown keys are ignored and empty strings are treated as absent.
        Raises ValueError when a field holds a value of the wrong type.
        """
        if not data:
            return cls()

        known = {f.name for f in fields(cls)}
        values: dict[str, Any] = {}
        for key, value in data.items():
            if key not in known or value is None:
                continue
            if isinstance(value, str) and not value.strip():
                continue
            if key == "scopes":
                values[key] = cls._normalize_scopes(value)
            elif key == "insecure":
                values[key] = cls._coerce_bool(value)
            elif isinstance(value, str):
                values[key] = value
            else:
                raise ValueError(f"field '{key}' must be a string, got {type(value).__name__}")

        return cls(**values)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the ocm.json layout, leaving out absent fields."""
        serialized: dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is None or value is False or value == []:
                continue
            serialized[f.name] = list(value) if f.name == "scopes" else value
        return serialized

    @staticmethod
    def _normalize_scopes(scopes: Any) -> list[str] | None:
        if isinstance(scopes, str):
            scopes = scopes.split(" ")
        elif not isinstance(scopes, list) or not all(isinstance(scope, str) for scope in scopes):
            raise ValueError("field 'scopes' must be a list of strings or a space separated string")
        normalized = [scope.strip() for scope in scopes if scope.strip()]
        return normalized or None

    @staticmethod
    def _coerce_bool(value: Any) -> bool:
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            return value.strip().lower() in ("1", "true", "yes", "y", "on")
        raise ValueError(f"field 'insecure' must be a boolean, got {type(value).__name__}")
