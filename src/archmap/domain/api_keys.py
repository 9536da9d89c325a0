"""ApiKey entity: a salted-hash credential with scopes.

Keys are stored as salted SHA-256 hashes, never as plaintext. The hash
and salt never appear in :meth:`ApiKey.to_dict`.
"""

from __future__ import annotations

import hashlib
import json
from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, Field, field_validator

from archmap.domain.types import ApiKeyScope

KEY_PREFIX = "rmap_"


class ApiKey(BaseModel):
    """Immutable API-key record."""

    model_config = {"frozen": True}

    id: int = 0
    name: str
    key_hash: str = Field(repr=False)
    salt: str = Field(repr=False)
    scopes: list[ApiKeyScope]
    created_at: str
    is_active: bool = True
    expires_at: str | None = None
    last_used_at: str | None = None

    @field_validator("scopes", mode="before")
    @classmethod
    def _decode_scopes(cls, value: Any) -> Any:
        if isinstance(value, str):
            return json.loads(value)
        return value

    def is_expired(self, now: datetime | None = None) -> bool:
        if not self.expires_at:
            return False
        expires = datetime.fromisoformat(self.expires_at.replace("Z", "+00:00"))
        if expires.tzinfo is None:
            expires = expires.replace(tzinfo=UTC)
        return expires < (now or datetime.now(UTC))

    def has_scope(self, scope: str) -> bool:
        return scope in self.scopes

    def scopes_json(self) -> str:
        return json.dumps([str(s) for s in self.scopes])

    def to_dict(self) -> dict[str, Any]:
        """Safe representation without ``key_hash`` and ``salt``."""
        return self.model_dump(mode="json", exclude={"key_hash", "salt"})


def hash_key(plaintext: str, salt: str) -> str:
    """SHA-256 of ``salt + plaintext`` as hex."""
    return hashlib.sha256((salt + plaintext).encode("utf-8")).hexdigest()


def deterministic_salt(plaintext: str) -> str:
    """Salt derived from the key itself, so a preset key always hashes the same."""
    return hashlib.sha256(plaintext.encode("utf-8")).hexdigest()[:32]
