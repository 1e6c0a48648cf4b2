from datetime import datetime, timedelta, timezone

import pytest

from apps.blog.models import InvalidBlogId, parse_blog_id
from apps.blog.schemas import (
    BlogResponse,
    FieldError,
    to_utc_millis,
    validate_blog,
    validate_blog_update,
)


def test_validate_blog_accepts_valid_payload():
    result = validate_blog({"title": "  Hello  ", "content": "World", "author": "Ann"})

    assert result.is_valid
    document = result.record.to_document()
    assert document["title"] == "Hello"
    assert document["content"] == "World"
    assert document["author"] == "Ann"
    assert document["createdAt"].tzinfo is not None
    assert document["createdAt"].microsecond % 1000 == 0


def test_validate_blog_reports_every_missing_field():
    result = validate_blog({})

    assert not result.is_valid
    assert result.errors == [
        FieldError(field="title", message="Please add a title"),
        FieldError(field="content", message="Please add content"),
        FieldError(field="author", message="Please add an author"),
    ]
    assert result.message == (
        "Blog validation failed: title: Please add a title, "
        "content: Please add content, author: Please add an author"
    )


def test_validate_blog_blank_title_counts_as_missing():
    result = validate_blog({"title": "   ", "content": "c", "author": "a"})

    assert result.errors == [FieldError(field="title", message="Please add a title")]


def test_validate_blog_title_length_measured_after_trimming():
    assert validate_blog({"title": " " + "x" * 100 + " ", "content": "c", "author": "a"}).is_valid

    result = validate_blog({"title": "x" * 101, "content": "c", "author": "a"})
    assert result.errors == [
        FieldError(field="title", message="Title cannot be more than 100 characters")
    ]


def test_validate_blog_does_not_coerce_types():
    result = validate_blog({"title": 123, "content": "c", "author": "a"})

    assert not result.is_valid
    assert result.errors[0].field == "title"


def test_validate_blog_keeps_supplied_created_at():
    result = validate_blog(
        {"title": "t", "content": "c", "author": "a", "createdAt": "2020-03-10T04:05:06.157Z"}
    )

    assert result.record.to_document()["createdAt"] == datetime(
        2020, 3, 10, 4, 5, 6, 157000, tzinfo=timezone.utc
    )


def test_validate_blog_rejects_bad_created_at():
    result = validate_blog({"title": "t", "content": "c", "author": "a", "createdAt": "yesterday"})

    assert [error.field for error in result.errors] == ["createdAt"]


def test_validate_blog_update_only_returns_supplied_fields():
    result = validate_blog_update({"content": "new", "createdAt": "2001-01-01T00:00:00Z", "_id": "x"})

    assert result.is_valid
    assert result.record.to_changes() == {"content": "new"}


def test_validate_blog_update_rejects_cleared_fields():
    assert validate_blog_update({"title": ""}).errors == [
        FieldError(field="title", message="Please add a title")
    ]
    assert validate_blog_update({"author": None}).errors == [
        FieldError(field="author", message="Please add an author")
    ]


def test_validate_blog_update_empty_body_is_valid():
    result = validate_blog_update({})

    assert result.is_valid
    assert result.record.to_changes() == {}


def test_to_utc_millis_normalizes_timezone_and_precision():
    value = datetime(2024, 5, 1, 12, 0, 0, 123456, tzinfo=timezone(timedelta(hours=2)))

    assert to_utc_millis(value) == datetime(2024, 5, 1, 10, 0, 0, 123000, tzinfo=timezone.utc)
    assert to_utc_millis(datetime(2024, 5, 1)).tzinfo == timezone.utc


def test_blog_response_renders_created_at_with_z_suffix():
    response = BlogResponse(
        id="abc", title="t", content="c", author="a",
        created_at=datetime(2020, 3, 10, 4, 5, 6, 157000),
    )

    assert response.model_dump(by_alias=True)["createdAt"] == "2020-03-10T04:05:06.157Z"


def test_parse_blog_id():
    assert str(parse_blog_id("507f1f77bcf86cd799439011")) == "507f1f77bcf86cd799439011"

    with pytest.raises(InvalidBlogId) as excinfo:
        parse_blog_id("not-an-id")
    assert 'Cast to ObjectId failed for value "not-an-id"' in str(excinfo.value)


def test_validate_blog_rejects_created_at_without_utc_equivalent():
    result = validate_blog(
        {"title": "t", "content": "c", "author": "a", "createdAt": "0001-01-01T00:00:00+05:00"}
    )

    assert not result.is_valid
    assert [error.field for error in result.errors] == ["createdAt"]
    assert "out of range" in result.errors[0].message


def test_validate_blog_update_applies_title_rules():
    result = validate_blog_update({"title": "  " + "x" * 101})
    assert result.errors == [
        FieldError(field="title", message="Title cannot be more than 100 characters")
    ]

    assert validate_blog_update({"title": "  Renamed  "}).record.to_changes() == {
        "title": "Renamed"
    }


def test_title_length_counts_code_points():
    assert validate_blog({"title": "\U0001F600" * 100, "content": "c", "author": "a"}).is_valid


def test_parse_blog_id_only_accepts_hex_strings():
    with pytest.raises(InvalidBlogId):
        parse_blog_id("abcdefghijkl")
