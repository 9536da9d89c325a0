"""ApiKeyService: generate, validate, list, and revoke API keys.

Only a salted SHA-256 hash is stored. The plaintext is returned once, by
:meth:`ApiKeyService.generate`, and cannot be recovered afterwards.
"""

from __future__ import annotations

import hmac
import logging
import secrets

from archmap.domain.api_keys import KEY_PREFIX, ApiKey, deterministic_salt, hash_key
from archmap.domain.types import API_KEY_SCOPES, ApiKeyScope
from archmap.services._helpers import fail, not_found, now_iso
from archmap.services.base import BaseService
from archmap.services.result import ServiceResult
from archmap.services.telemetry import traced

logger = logging.getLogger(__name__)


class ApiKeyService(BaseService):
    """Credential management over the ``api_keys`` table."""

    @traced
    def generate(
        self,
        name: str,
        scopes: list[str],
        expires_at: str | None = None,
        plaintext: str | None = None,
    ) -> ServiceResult:
        """Create a key named *name* and return its plaintext.

        A preset *plaintext* must carry the ``rmap_`` prefix; its salt is
        derived from the key so reseeding yields the same hash.
        """
        op = "generate_api_key"
        if not name or not name.strip():
            return fail(op, "INVALID_NAME", "Invalid name: name must not be empty")
        unknown = [s for s in scopes if s not in API_KEY_SCOPES]
        if not scopes or unknown:
            return fail(
                op,
                "INVALID_SCOPE",
                f"Invalid scope(s): {', '.join(unknown) or '(none)'}. "
                f"Must be one of: {', '.join(API_KEY_SCOPES)}",
            )
        if self._repos.api_keys.find_by_name(name) is not None:
            return fail(op, "ALREADY_EXISTS", f"API key already exists: {name}", name=name)
        if plaintext is not None and not plaintext.startswith(KEY_PREFIX):
            return fail(op, "INVALID_CONTENT", f"Pre-set key must start with {KEY_PREFIX}")

        if plaintext is not None:
            key_text = plaintext
            salt = deterministic_salt(plaintext)
        else:
            key_text = f"{KEY_PREFIX}{secrets.token_hex(16)}"
            salt = secrets.token_hex(16)

        record = self._repos.api_keys.save(
            ApiKey(
                name=name,
                key_hash=hash_key(key_text, salt),
                salt=salt,
                scopes=[ApiKeyScope(s) for s in dict.fromkeys(scopes)],
                created_at=now_iso(),
                expires_at=expires_at,
            )
        )
        logger.info("Generated API key %s", name)
        return ServiceResult(
            ok=True,
            op=op,
            data={"plaintext": key_text, "record": record.to_dict()},
            warnings=["Store this key now: it cannot be shown again"],
        )

    @traced
    def validate(self, plaintext: str) -> ServiceResult:
        """Match *plaintext* against every stored hash in constant time per key.

        ``data["status"]`` is ``valid``, ``invalid``, ``expired`` or
        ``revoked``. A valid key has its ``last_used_at`` refreshed.
        """
        op = "validate_api_key"
        for key in self._repos.api_keys.find_all():
            candidate = hash_key(plaintext, key.salt)
            if not hmac.compare_digest(candidate, key.key_hash):
                continue
            if not key.is_active:
                return ServiceResult(ok=True, op=op, data={"status": "revoked"})
            if key.is_expired():
                return ServiceResult(ok=True, op=op, data={"status": "expired"})
            stamp = now_iso()
            self._repos.api_keys.update_last_used(key.id, stamp)
            used = key.model_copy(update={"last_used_at": stamp})
            return ServiceResult(ok=True, op=op, data={"status": "valid", "key": used.to_dict()})
        return ServiceResult(ok=True, op=op, data={"status": "invalid"})

    @traced
    def list_keys(self) -> ServiceResult:
        items = [k.to_dict() for k in self._repos.api_keys.find_all()]
        return ServiceResult(
            ok=True, op="list_api_keys", data={"count": len(items), "items": items}
        )

    @traced
    def revoke(self, key_id: int) -> ServiceResult:
        op = "revoke_api_key"
        key = self._repos.api_keys.find_by_id(key_id)
        if key is None:
            return not_found(op, "API key", str(key_id))
        if not key.is_active:
            return fail(op, "ALREADY_EXISTS", f"API key already revoked: {key_id}", id=key_id)
        self._repos.api_keys.revoke(key_id)
        logger.info("Revoked API key %s (%s)", key_id, key.name)
        return ServiceResult(ok=True, op=op, data={"id": key_id, "name": key.name, "revoked": True})
