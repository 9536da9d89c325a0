"""Tests for ServiceResult and ServiceError."""

import json

import pytest
from pydantic import ValidationError

from archmap.services.result import ServiceError, ServiceResult


class TestServiceResult:
    def test_success_construction(self) -> None:
        result = ServiceResult(ok=True, op="create_component", data={"id": "auth"})
        assert result.ok is True
        assert result.op == "create_component"
        assert result.data == {"id": "auth"}
        assert result.warnings == []
        assert result.error is None
        assert result.meta is None

    def test_error_construction(self) -> None:
        error = ServiceError(code="NOT_FOUND", message="Node 'x' not found")
        result = ServiceResult(ok=False, op="get_version", error=error)
        assert result.ok is False
        assert result.error is not None
        assert result.error.code == "NOT_FOUND"

    def test_with_warnings(self) -> None:
        result = ServiceResult(ok=True, op="batch_upload", warnings=["1 feature(s) rejected"])
        assert len(result.warnings) == 1

    def test_json_serialization(self) -> None:
        result = ServiceResult(
            ok=True,
            op="test",
            data={"key": "value"},
            meta={"duration_ms": 42},
        )
        parsed = json.loads(result.model_dump_json())
        assert parsed["ok"] is True
        assert parsed["op"] == "test"
        assert parsed["data"]["key"] == "value"
        assert parsed["meta"]["duration_ms"] == 42

    def test_frozen(self) -> None:
        result = ServiceResult(ok=True, op="test")
        with pytest.raises(ValidationError):
            result.ok = False  # type: ignore[misc]


class TestServiceError:
    def test_with_detail(self) -> None:
        error = ServiceError(
            code="INVALID_TYPE",
            message="Invalid edge type: LIKES",
            detail={"allowed": ["DEPENDS_ON"]},
        )
        assert error.detail["allowed"] == ["DEPENDS_ON"]

    def test_default_detail(self) -> None:
        error = ServiceError(code="E001", message="bad")
        assert error.detail == {}
