import pytest

from src.api.errors import PostValidationError
from src.api.schemas import PostCreate, PostUpdate
from src.api.validation import to_rule_errors, validate_payload


class TestValidatePayload:
    def test_returns_model_when_valid(self):
        post = validate_payload(PostCreate, {"title": "hello", "content": "world"})
        assert isinstance(post, PostCreate)
        assert post.title == "hello"

    def test_collects_every_field(self):
        with pytest.raises(PostValidationError) as exc_info:
            validate_payload(PostCreate, {})
        assert exc_info.value.status_code == 422
        assert [(e["field"], e["rule"]) for e in exc_info.value.errors] == [
            ("title", "required"),
            ("content", "required"),
        ]

    def test_update_fields_are_optional(self):
        update = validate_payload(PostUpdate, {"content": "only this"})
        assert update.changes() == {"content": "only this"}

    def test_update_applies_word_limit(self):
        with pytest.raises(PostValidationError) as exc_info:
            validate_payload(PostUpdate, {"title": "x " * 101})
        assert exc_info.value.errors == [
            {
                "field": "title",
                "rule": "maxLength",
                "args": {"maxLength": 100},
                "message": "maxLength validation failed",
            }
        ]

    def test_non_mapping_input(self):
        with pytest.raises(PostValidationError) as exc_info:
            validate_payload(PostCreate, ["not", "a", "dict"])
        assert exc_info.value.errors[0]["field"] == "body"


class TestToRuleErrors:
    def test_strips_body_prefix(self):
        records = to_rule_errors([{"type": "missing", "loc": ("body", "title")}])
        assert records == [{"field": "title", "rule": "required", "message": "required validation failed"}]

    def test_keeps_first_error_per_field(self):
        records = to_rule_errors(
            [
                {"type": "string_type", "loc": ("body", "title")},
                {"type": "maxLength", "loc": ("body", "title"), "ctx": {"maxLength": 100}},
            ]
        )
        assert [r["rule"] for r in records] == ["string"]

    def test_non_object_input_maps_to_object_rule(self):
        records = to_rule_errors([{"type": "model_attributes_type", "loc": ("body",)}])
        assert records[0]["field"] == "body"
        assert records[0]["rule"] == "object"
        assert records[0]["message"] == "object validation failed"
        assert "args" not in records[0]

    def test_json_errors_are_reported_on_body(self):
        records = to_rule_errors([{"type": "json_invalid", "loc": ("body", 7), "ctx": {"error": "x"}}])
        assert records[0]["field"] == "body"
        assert records[0]["rule"] == "json"
        assert "args" not in records[0]


def test_word_count_ignores_extra_whitespace():
    post = PostCreate(title="  spaced   out\ttitle  ", content="c")
    assert post.title == "  spaced   out\ttitle  "


def test_unmapped_types_use_stable_rule():
    records = to_rule_errors([{"type": "int_parsing", "loc": ("query", "limit")}])
    assert records == [{"field": "limit", "rule": "invalid", "message": "invalid validation failed"}]
