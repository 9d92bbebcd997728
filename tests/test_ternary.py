"""Tests for the JsonTernary value type."""

from __future__ import annotations

import copy
import pickle

import pytest
from pydantic import TypeAdapter, ValidationError

from jsonternary.exceptions import AbsentValueError
from jsonternary.ternary import ABSENT, NULL, JsonTernary, TernaryKind, json_type_name

# ------------------------------------------------------------------
# Cases and predicates
# ------------------------------------------------------------------


class TestCases:
    def test_value(self) -> None:
        t = JsonTernary.of("123")
        assert t.is_value()
        assert not t.is_null()
        assert not t.is_absent()
        assert t.kind == TernaryKind.VALUE
        assert t.unwrap() == "123"

    def test_null(self) -> None:
        t = JsonTernary.null()
        assert not t.is_value()
        assert t.is_null()
        assert not t.is_absent()
        assert t is NULL

    def test_absent(self) -> None:
        t = JsonTernary.absent()
        assert not t.is_value()
        assert not t.is_null()
        assert t.is_absent()
        assert t is ABSENT

    def test_default_is_absent(self) -> None:
        assert JsonTernary.default() == ABSENT

    def test_value_of_none_is_not_null(self) -> None:
        t = JsonTernary.of(None)
        assert t.is_value()
        assert t != NULL

    def test_payload_only_for_value(self) -> None:
        with pytest.raises(ValueError):
            JsonTernary(TernaryKind.NULL, 5)

    def test_from_optional(self) -> None:
        assert JsonTernary.from_optional(None) == NULL
        assert JsonTernary.from_optional(0) == JsonTernary.of(0)

    def test_to_optional_and_get(self) -> None:
        assert JsonTernary.of(3).to_optional() == 3
        assert NULL.to_optional() is None
        assert ABSENT.to_optional() is None
        assert ABSENT.get("fallback") == "fallback"

    @pytest.mark.parametrize("t", [NULL, ABSENT])
    def test_unwrap_without_payload_raises(self, t: JsonTernary[int]) -> None:
        with pytest.raises(AbsentValueError):
            t.unwrap()

    def test_repr(self) -> None:
        assert repr(JsonTernary.of(42)) == "JsonTernary.of(42)"
        assert repr(NULL) == "JsonTernary.null()"
        assert repr(ABSENT) == "JsonTernary.absent()"


# ------------------------------------------------------------------
# Value semantics
# ------------------------------------------------------------------


class TestValueSemantics:
    def test_equality(self) -> None:
        assert JsonTernary.of(1) == JsonTernary.of(1)
        assert JsonTernary.of(1) != JsonTernary.of(2)
        assert NULL == JsonTernary(TernaryKind.NULL)
        assert NULL != ABSENT
        assert JsonTernary.of(1) != 1

    def test_ordering_by_case_then_payload(self) -> None:
        items = [ABSENT, JsonTernary.of(2), NULL, JsonTernary.of(1)]
        assert sorted(items) == [JsonTernary.of(1), JsonTernary.of(2), NULL, ABSENT]
        assert JsonTernary.of(100) < NULL < ABSENT
        assert NULL <= NULL

    def test_hash_consistent_with_equality(self) -> None:
        assert hash(JsonTernary.of("a")) == hash(JsonTernary.of("a"))
        assert len({NULL, JsonTernary(TernaryKind.NULL), ABSENT, JsonTernary.of(1)}) == 3

    def test_immutable(self) -> None:
        t = JsonTernary.of(1)
        with pytest.raises(AttributeError):
            t._value = 2  # type: ignore[misc]
        with pytest.raises(AttributeError):
            del t._kind

    def test_pickle_and_deepcopy(self) -> None:
        for t in (JsonTernary.of([1, 2]), NULL, ABSENT):
            assert pickle.loads(pickle.dumps(t)) == t
            assert copy.deepcopy(t) == t

    def test_deepcopy_does_not_share_payload(self) -> None:
        t = JsonTernary.of([1, 2])
        clone = copy.deepcopy(t)
        clone.unwrap().append(3)
        assert t.unwrap() == [1, 2]


# ------------------------------------------------------------------
# Standalone encoding/decoding
# ------------------------------------------------------------------


class TestStandaloneCodec:
    def test_encode(self) -> None:
        assert JsonTernary.of([1, "a"]).encode() == [1, "a"]
        assert NULL.encode() is None

    def test_encode_absent_raises(self) -> None:
        with pytest.raises(AbsentValueError):
            ABSENT.encode()

    def test_type_adapter_dump(self) -> None:
        adapter = TypeAdapter(JsonTernary[str])
        assert adapter.dump_json(JsonTernary.of("123")) == b'"123"'
        assert adapter.dump_json(NULL) == b"null"
        # No enclosing object means no key to omit.
        assert adapter.dump_json(ABSENT) == b"null"

    def test_type_adapter_validate(self) -> None:
        adapter = TypeAdapter(JsonTernary[int])
        assert adapter.validate_json("42") == JsonTernary.of(42)
        assert adapter.validate_json("null") == NULL
        assert adapter.validate_python(ABSENT) is ABSENT
        assert adapter.validate_python(JsonTernary.of(7)) == JsonTernary.of(7)

    def test_type_adapter_mismatch(self) -> None:
        adapter = TypeAdapter(JsonTernary[int])
        with pytest.raises(ValidationError) as excinfo:
            adapter.validate_python("forty-two")
        error = excinfo.value.errors()[0]
        assert error["type"] == "ternary_type_mismatch"
        assert error["ctx"] == {"expected": "int", "actual": "string"}

    def test_prebuilt_value_is_revalidated(self) -> None:
        adapter = TypeAdapter(JsonTernary[int])
        with pytest.raises(ValidationError):
            adapter.validate_python(JsonTernary.of("nope"))

    def test_json_type_names(self) -> None:
        assert json_type_name(None) == "null"
        assert json_type_name(True) == "boolean"
        assert json_type_name(1.5) == "number"
        assert json_type_name("x") == "string"
        assert json_type_name([]) == "array"
        assert json_type_name({}) == "object"

    @pytest.mark.parametrize("document", ['"42"', "true", "42.0"])
    def test_type_adapter_strict_json(self, document: str) -> None:
        adapter = TypeAdapter(JsonTernary[int])
        with pytest.raises(ValidationError):
            adapter.validate_json(document, strict=True)
        assert adapter.validate_json("null", strict=True) == NULL
