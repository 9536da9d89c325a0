"""Tests for the ApiKey entity and hashing helpers."""

from datetime import UTC, datetime

from archmap.domain.api_keys import ApiKey, deterministic_salt, hash_key


def _key(**kwargs: object) -> ApiKey:
    defaults: dict[str, object] = {
        "name": "ci",
        "key_hash": "h",
        "salt": "s",
        "scopes": ["read"],
        "created_at": "2026-01-01T00:00:00+00:00",
    }
    defaults.update(kwargs)
    return ApiKey(**defaults)  # type: ignore[arg-type]


class TestHashing:
    def test_hash_is_salted_sha256(self) -> None:
        digest = hash_key("rmap_abc", "salt")
        assert len(digest) == 64
        assert digest != hash_key("rmap_abc", "other")

    def test_deterministic_salt(self) -> None:
        assert deterministic_salt("rmap_x") == deterministic_salt("rmap_x")
        assert len(deterministic_salt("rmap_x")) == 32


class TestApiKey:
    def test_scopes_decoded_from_json(self) -> None:
        assert _key(scopes='["read", "write"]').has_scope("write")

    def test_to_dict_hides_secrets(self) -> None:
        data = _key().to_dict()
        assert "key_hash" not in data
        assert "salt" not in data
        assert data["scopes"] == ["read"]

    def test_expiry(self) -> None:
        now = datetime(2026, 6, 1, tzinfo=UTC)
        assert _key(expires_at="2026-01-01T00:00:00Z").is_expired(now)
        assert not _key(expires_at="2027-01-01T00:00:00Z").is_expired(now)
        assert not _key().is_expired(now)
