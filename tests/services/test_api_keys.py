"""Tests for ApiKeyService: generation, validation, revocation."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

from archmap.domain.api_keys import KEY_PREFIX, deterministic_salt, hash_key
from archmap.domain.repositories import Repositories
from archmap.services.api_keys import ApiKeyService


class TestGenerate:
    def test_returns_plaintext_once(self, any_repos: Repositories) -> None:
        result = ApiKeyService(any_repos).generate("ci", ["read", "write"])
        assert result.ok
        assert result.op == "generate_api_key"
        plaintext = result.data["plaintext"]
        assert plaintext.startswith(KEY_PREFIX)
        assert len(plaintext) == len(KEY_PREFIX) + 32
        assert result.data["record"]["scopes"] == ["read", "write"]
        assert "key_hash" not in result.data["record"]
        assert result.warnings

    def test_stores_hash_not_plaintext(self, any_repos: Repositories) -> None:
        plaintext = ApiKeyService(any_repos).generate("ci", ["read"]).data["plaintext"]
        stored = any_repos.api_keys.find_by_name("ci")
        assert stored is not None
        assert stored.key_hash != plaintext
        assert stored.key_hash == hash_key(plaintext, stored.salt)

    def test_duplicate_scopes_collapsed(self, memory_repos: Repositories) -> None:
        result = ApiKeyService(memory_repos).generate("ci", ["read", "read", "admin"])
        assert result.data["record"]["scopes"] == ["read", "admin"]

    def test_preset_key_is_deterministic(self, memory_repos: Repositories) -> None:
        preset = f"{KEY_PREFIX}seeded"
        result = ApiKeyService(memory_repos).generate("seed", ["admin"], plaintext=preset)
        assert result.data["plaintext"] == preset
        stored = memory_repos.api_keys.find_by_name("seed")
        assert stored is not None
        assert stored.salt == deterministic_salt(preset)

    def test_preset_without_prefix(self, memory_repos: Repositories) -> None:
        result = ApiKeyService(memory_repos).generate("seed", ["admin"], plaintext="abc")
        assert result.error is not None
        assert result.error.code == "INVALID_CONTENT"

    def test_unknown_scope(self, memory_repos: Repositories) -> None:
        result = ApiKeyService(memory_repos).generate("ci", ["read", "root"])
        assert result.error is not None
        assert result.error.code == "INVALID_SCOPE"
        assert "root" in result.error.message

    def test_no_scopes(self, memory_repos: Repositories) -> None:
        result = ApiKeyService(memory_repos).generate("ci", [])
        assert result.error is not None
        assert result.error.code == "INVALID_SCOPE"

    def test_blank_name(self, memory_repos: Repositories) -> None:
        result = ApiKeyService(memory_repos).generate(" ", ["read"])
        assert result.error is not None
        assert result.error.code == "INVALID_NAME"

    def test_duplicate_name(self, any_repos: Repositories) -> None:
        svc = ApiKeyService(any_repos)
        svc.generate("ci", ["read"])
        result = svc.generate("ci", ["write"])
        assert result.error is not None
        assert result.error.code == "ALREADY_EXISTS"


class TestValidate:
    def test_valid_key_updates_last_used(self, any_repos: Repositories) -> None:
        svc = ApiKeyService(any_repos)
        plaintext = svc.generate("ci", ["read"]).data["plaintext"]
        result = svc.validate(plaintext)
        assert result.ok
        assert result.data["status"] == "valid"
        assert result.data["key"]["name"] == "ci"
        stored = any_repos.api_keys.find_by_name("ci")
        assert stored is not None
        assert stored.last_used_at is not None

    def test_unknown_key(self, any_repos: Repositories) -> None:
        ApiKeyService(any_repos).generate("ci", ["read"])
        result = ApiKeyService(any_repos).validate(f"{KEY_PREFIX}nope")
        assert result.ok
        assert result.data == {"status": "invalid"}

    def test_expired_key(self, memory_repos: Repositories) -> None:
        svc = ApiKeyService(memory_repos)
        past = (datetime.now(UTC) - timedelta(days=1)).isoformat()
        plaintext = svc.generate("old", ["read"], expires_at=past).data["plaintext"]
        assert svc.validate(plaintext).data == {"status": "expired"}

    def test_future_expiry_is_valid(self, memory_repos: Repositories) -> None:
        svc = ApiKeyService(memory_repos)
        future = (datetime.now(UTC) + timedelta(days=1)).isoformat()
        plaintext = svc.generate("new", ["read"], expires_at=future).data["plaintext"]
        assert svc.validate(plaintext).data["status"] == "valid"

    def test_revoked_key(self, any_repos: Repositories) -> None:
        svc = ApiKeyService(any_repos)
        generated = svc.generate("ci", ["read"]).data
        svc.revoke(generated["record"]["id"])
        assert svc.validate(generated["plaintext"]).data == {"status": "revoked"}


class TestListAndRevoke:
    def test_list(self, any_repos: Repositories) -> None:
        svc = ApiKeyService(any_repos)
        svc.generate("a", ["read"])
        svc.generate("b", ["write"])
        result = svc.list_keys()
        assert result.data["count"] == 2
        assert {item["name"] for item in result.data["items"]} == {"a", "b"}
        assert all("salt" not in item for item in result.data["items"])

    def test_revoke(self, any_repos: Repositories) -> None:
        svc = ApiKeyService(any_repos)
        key_id = svc.generate("ci", ["read"]).data["record"]["id"]
        result = svc.revoke(key_id)
        assert result.ok
        assert result.data == {"id": key_id, "name": "ci", "revoked": True}
        stored = any_repos.api_keys.find_by_id(key_id)
        assert stored is not None
        assert stored.is_active is False

    def test_revoke_twice(self, memory_repos: Repositories) -> None:
        svc = ApiKeyService(memory_repos)
        key_id = svc.generate("ci", ["read"]).data["record"]["id"]
        svc.revoke(key_id)
        result = svc.revoke(key_id)
        assert result.error is not None
        assert result.error.code == "ALREADY_EXISTS"

    def test_revoke_missing(self, memory_repos: Repositories) -> None:
        result = ApiKeyService(memory_repos).revoke(42)
        assert result.error is not None
        assert result.error.code == "NOT_FOUND"
