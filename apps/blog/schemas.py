"""
Pydantic schemas for Blog API.

Defines the Blog record, request validation and the response envelopes.
"""
from datetime import datetime, timezone
from typing import Annotated, Any, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StringConstraints,
    ValidationError,
    field_serializer,
    field_validator,
)

TITLE_MAX_LENGTH = 100

REQUIRED_MESSAGES = {
    "title": "Please add a title",
    "content": "Please add content",
    "author": "Please add an author",
}
TITLE_TOO_LONG_MESSAGE = f"Title cannot be more than {TITLE_MAX_LENGTH} characters"

Title = Annotated[
    str, StringConstraints(strip_whitespace=True, min_length=1, max_length=TITLE_MAX_LENGTH)
]
Text = Annotated[str, StringConstraints(min_length=1)]

BLOG_EXAMPLE = {
    "id": "5e671b5a1c9d440000a1b2c3",
    "title": "The New Turing Omnibus",
    "content": "Alexander Dewdney",
    "author": "John Doe",
    "createdAt": "2020-03-10T04:05:06.157Z",
}


def to_utc_millis(value: datetime) -> datetime:
    """Normalize to UTC at millisecond precision, the precision BSON dates keep."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    else:
        value = value.astimezone(timezone.utc)
    return value.replace(microsecond=value.microsecond // 1000 * 1000)


def utc_now() -> datetime:
    return to_utc_millis(datetime.now(timezone.utc))


# ──────────────────────────────────────────────────────────────────────────────
# Requests
# ──────────────────────────────────────────────────────────────────────────────

class BlogCreate(BaseModel):
    """Schema for creating a new blog. createdAt defaults to now."""
    title: Title
    content: Text
    author: Text
    created_at: Optional[datetime] = Field(None, alias="createdAt")

    @field_validator("created_at")
    @classmethod
    def normalize_created_at(cls, value: Optional[datetime]) -> Optional[datetime]:
        if value is None:
            return None
        try:
            return to_utc_millis(value)
        except OverflowError:
            # e.g. 0001-01-01T00:00:00+05:00 has no UTC equivalent
            raise ValueError("date is out of range") from None

    def to_document(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "content": self.content,
            "author": self.author,
            "createdAt": self.created_at or utc_now(),
        }


class BlogUpdate(BaseModel):
    """Schema for updating a blog. All fields optional, createdAt is never updated."""
    title: Optional[Title] = None
    content: Optional[Text] = None
    author: Optional[Text] = None

    def to_changes(self) -> dict[str, Any]:
        return self.model_dump(exclude_unset=True)


# ──────────────────────────────────────────────────────────────────────────────
# Validation results
# ──────────────────────────────────────────────────────────────────────────────

class FieldError(BaseModel):
    field: str
    message: str


class BlogValidation(BaseModel):
    """Either a validated record or the list of field errors that rejected it."""
    record: Optional[Union[BlogCreate, BlogUpdate]] = None
    errors: list[FieldError] = Field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    @property
    def message(self) -> str:
        details = ", ".join(f"{error.field}: {error.message}" for error in self.errors)
        return f"Blog validation failed: {details}"


def _field_message(field_name: str, error_type: str, default: str) -> str:
    if field_name in REQUIRED_MESSAGES and error_type in ("missing", "string_too_short"):
        return REQUIRED_MESSAGES[field_name]
    if field_name == "title" and error_type == "string_too_long":
        return TITLE_TOO_LONG_MESSAGE
    return default


def _field_errors(exc: ValidationError) -> list[FieldError]:
    errors = []
    seen = set()
    for err in exc.errors():
        loc = err.get("loc") or ("body",)
        field_name = str(loc[0])
        if field_name in seen:
            continue
        seen.add(field_name)
        errors.append(
            FieldError(
                field=field_name,
                message=_field_message(field_name, err["type"], err["msg"]),
            )
        )
    return errors


def validate_blog(payload: dict[str, Any]) -> BlogValidation:
    """Validate a full blog payload for creation."""
    try:
        return BlogValidation(record=BlogCreate.model_validate(payload))
    except ValidationError as exc:
        return BlogValidation(errors=_field_errors(exc))


def validate_blog_update(payload: dict[str, Any]) -> BlogValidation:
    """
    Validate a partial update.

    Every supplied field must satisfy the same rules as on creation, and
    required fields cannot be cleared with null. The stored record is valid
    and only supplied fields change, so this holds for the merged document.
    """
    try:
        update = BlogUpdate.model_validate(payload)
    except ValidationError as exc:
        return BlogValidation(errors=_field_errors(exc))

    cleared = [
        FieldError(field=name, message=REQUIRED_MESSAGES[name])
        for name, value in update.to_changes().items()
        if value is None
    ]
    if cleared:
        return BlogValidation(errors=cleared)
    return BlogValidation(record=update)


# ──────────────────────────────────────────────────────────────────────────────
# Responses
# ──────────────────────────────────────────────────────────────────────────────

class BlogResponse(BaseModel):
    """Schema for blog responses."""
    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={"example": BLOG_EXAMPLE},
    )

    id: str = Field(..., description="The auto-generated id of the blog")
    title: str = Field(..., description="The title of your blog")
    content: str = Field(..., description="The content of your blog")
    author: str = Field(..., description="The author of the blog")
    created_at: Optional[datetime] = Field(
        None, alias="createdAt", description="The date the blog was added"
    )

    @field_serializer("created_at")
    def serialize_created_at(self, value: Optional[datetime]) -> Optional[str]:
        if value is None:
            return None
        return to_utc_millis(value).isoformat(timespec="milliseconds").replace("+00:00", "Z")

    @classmethod
    def from_document(cls, document: dict[str, Any]) -> "BlogResponse":
        return cls(
            id=str(document["_id"]),
            title=document.get("title", ""),
            content=document.get("content", ""),
            author=document.get("author", ""),
            created_at=document.get("createdAt"),
        )


class BlogEnvelope(BaseModel):
    success: bool = True
    data: BlogResponse


class BlogListEnvelope(BaseModel):
    success: bool = True
    count: int
    data: list[BlogResponse]


class DeletedEnvelope(BaseModel):
    success: bool = True
    data: dict[str, Any] = Field(default_factory=dict)


class ErrorEnvelope(BaseModel):
    success: bool = False
    error: str
