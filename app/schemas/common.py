"""Shared schema types: pagination envelope, URL strings, datetimes, slugs, partial updates."""

from datetime import datetime
from typing import Annotated, ClassVar, FrozenSet, Generic, List, TypeVar

from pydantic import (
    AfterValidator,
    BaseModel,
    HttpUrl,
    TypeAdapter,
    ValidationError,
    model_validator,
)

from app.utils import as_utc, generate_slug, is_valid_slug

T = TypeVar("T")

SLUG_REGEX = r"^[a-z0-9-]+$"
MAX_PAGE_SIZE = 500

_http_url = TypeAdapter(HttpUrl)


def _validate_url(value: str) -> str:
    try:
        _http_url.validate_python(value)
    except ValidationError:
        raise ValueError("Invalid URL")
    return value


# Stored as the original string; HttpUrl would normalize it.
UrlStr = Annotated[str, AfterValidator(_validate_url)]


# Naive values are read as UTC.
UtcDatetime = Annotated[datetime, AfterValidator(as_utc)]


def checked_slug(reserved: FrozenSet[str] = frozenset()) -> AfterValidator:
    """Validator for 3-200 character slugs that are not in `reserved`."""

    def check(value: str) -> str:
        if not is_valid_slug(value):
            raise ValueError("Slug must be 3-200 lowercase letters, digits or hyphens")
        if value in reserved:
            raise ValueError(f"Slug '{value}' is reserved")
        return value

    return AfterValidator(check)


class PaginationInfo(BaseModel):
    """Pagination block of a search response."""

    page: int
    limit: int
    total: int
    total_pages: int
    has_next: bool
    has_prev: bool


class Page(BaseModel, Generic[T]):
    """Paginated search response."""

    data: List[T]
    pagination: PaginationInfo


class SuccessResponse(BaseModel):
    success: bool = True


class PartialUpdate(BaseModel):
    """
    Base for PATCH-style update bodies.

    Every field is optional, but fields listed in `required_fields`
    may not be explicitly set to null.
    """

    required_fields: ClassVar[FrozenSet[str]] = frozenset()

    @model_validator(mode="after")
    def _reject_null_required(self):
        for name in self.model_fields_set & self.required_fields:
            if getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self

    def changes(self) -> dict:
        """Only the fields the client actually sent."""
        return self.model_dump(exclude_unset=True)


class SlugFromField(BaseModel):
    """
    Base for create bodies whose slug may be left out.

    A missing slug is derived from the `slug_source` field, so that field
    must contain at least one letter or digit.
    """

    slug_source: ClassVar[str] = "name"

    @model_validator(mode="after")
    def _require_sluggable_source(self):
        if getattr(self, "slug", None) is None and not generate_slug(
            getattr(self, self.slug_source)
        ):
            raise ValueError(
                f"slug is required when {self.slug_source} has no letters or digits"
            )
        return self
