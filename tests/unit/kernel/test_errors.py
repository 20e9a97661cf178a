"""Unit tests for the kernel error hierarchy."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from snapreg.kernel.errors import (
    ApplicationError,
    BaseError,
    ConflictError,
    DecodeError,
    DomainError,
    DuplicateIdentifierError,
    EncodeError,
    InfrastructureError,
    NotFoundError,
    PipelineClosedError,
    ReadError,
    SerializationError,
    TypeMismatchError,
    UnresolvedReferenceError,
    ValidationError,
    WriteError,
)


class TestBaseError:
    def test_message_is_stored(self) -> None:
        err = BaseError("something went wrong")
        assert err.message == "something went wrong"

    def test_default_code(self) -> None:
        assert BaseError("m").code == "base_error"

    def test_custom_code(self) -> None:
        assert BaseError("m", code="custom").code == "custom"

    def test_to_dict_basic(self) -> None:
        err = BaseError("m", code="my_code", detail={"key": "val"})
        assert err.to_dict() == {"code": "my_code", "message": "m", "detail": {"key": "val"}}

    def test_to_dict_includes_cause_repr(self) -> None:
        err = BaseError("wrapper", cause=ValueError("original"))
        assert "original" in err.to_dict()["cause"]

    def test_cause_sets_dunder_cause(self) -> None:
        cause = RuntimeError("root")
        assert BaseError("wrap", cause=cause).__cause__ is cause

    def test_str_is_valid_json(self) -> None:
        parsed = json.loads(str(BaseError("oops", code="oops", detail={"x": 1})))
        assert parsed["code"] == "oops"
        assert parsed["detail"] == {"x": 1}

    def test_repr_contains_code_and_message(self) -> None:
        r = repr(BaseError("hello", code="hi"))
        assert "hi" in r
        assert "hello" in r


class TestDomainErrors:
    def test_duplicate_identifier(self) -> None:
        err = DuplicateIdentifierError(7, "snapshot")
        assert isinstance(err, ConflictError)
        assert isinstance(err, DomainError)
        assert err.smri == 7
        assert err.kind == "snapshot"
        assert err.code == "duplicate_identifier"
        assert err.detail == {"smri": 7, "kind": "snapshot"}

    def test_not_found_message(self) -> None:
        err = NotFoundError("Model", 3)
        assert err.message == "Model '3' not found"
        assert err.resource == "Model"
        assert err.identifier == 3

    def test_not_found_without_identifier(self) -> None:
        assert NotFoundError("Model").message == "Model not found"

    def test_type_mismatch(self) -> None:
        err = TypeMismatchError(4, int, str)
        assert err.expected is int
        assert err.actual is str
        assert "str" in err.message
        assert err.detail["expected"] == "int"

    def test_unresolved_reference_sorts_and_dedupes(self) -> None:
        err = UnresolvedReferenceError([5, 2, 5])
        assert isinstance(err, NotFoundError)
        assert err.missing == (2, 5)
        assert err.detail == {"missing": [2, 5]}
        assert "2, 5" in err.message

    def test_validation_error_lists_errors(self) -> None:
        err = ValidationError("bad", errors=[{"field": "smri"}])
        assert err.to_dict()["errors"] == [{"field": "smri"}]


class TestInfrastructureErrors:
    def test_encode_and_decode_are_serialization_errors(self) -> None:
        assert issubclass(EncodeError, SerializationError)
        assert issubclass(DecodeError, SerializationError)
        assert issubclass(SerializationError, InfrastructureError)

    def test_payload_type(self) -> None:
        assert EncodeError("x", payload_type="Unit").payload_type == "Unit"

    def test_write_error_path(self) -> None:
        err = WriteError("/tmp/a.bin")
        assert err.path == Path("/tmp/a.bin")
        assert "/tmp/a.bin" in err.message
        assert err.code == "write_error"

    def test_read_error_path(self) -> None:
        assert ReadError("/x", "boom").message == "boom"


class TestApplicationErrors:
    def test_pipeline_closed(self) -> None:
        err = PipelineClosedError()
        assert isinstance(err, ApplicationError)
        assert err.code == "pipeline_closed"

    def test_is_raisable(self) -> None:
        with pytest.raises(ApplicationError):
            raise PipelineClosedError()
