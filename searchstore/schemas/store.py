from collections import Counter
from typing import Any, Iterable, Iterator, List, Optional

from pydantic import (
    AnyUrl,
    BaseModel,
    ConfigDict,
    Field,
    RootModel,
    TypeAdapter,
    ValidationError,
    field_validator,
    model_validator,
)

from searchstore.exceptions import StoreValidationError

_url_adapter = TypeAdapter(AnyUrl)

STORE_FIELDS = ("title", "excerpt", "categories", "tags", "url", "teaser")


def _check_absolute_url(value: str) -> str:
    parsed = _url_adapter.validate_python(value)
    if not parsed.host:
        raise ValueError(f"url has no host: {value!r}")
    # keep the caller's spelling, AnyUrl normalizes trailing slashes
    return value


class PostSummary(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    title: str
    excerpt: str
    categories: List[str] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)
    url: str
    teaser: Optional[str] = None

    @field_validator("categories", "tags", mode="before")
    @classmethod
    def _labels_never_null(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, str):
            return [value]
        return value

    @field_validator("url")
    @classmethod
    def _url_is_absolute(cls, value: str) -> str:
        return _check_absolute_url(value)

    @field_validator("teaser")
    @classmethod
    def _teaser_not_blank(cls, value: Optional[str]) -> Optional[str]:
        # site-relative teasers ("/assets/images/x.png") are valid in a store
        if value is not None and not value.strip():
            raise ValueError("teaser must be null or a non-empty string")
        return value


class SearchStore(RootModel[List[PostSummary]]):
    """Ordered records handed to the client-side search index."""

    root: List[PostSummary] = Field(default_factory=list)

    @model_validator(mode="after")
    def _urls_are_unique(self) -> "SearchStore":
        counts = Counter(record.url for record in self.root)
        duplicates = sorted(url for url, count in counts.items() if count > 1)
        if duplicates:
            raise ValueError(f"duplicate url(s): {', '.join(duplicates)}")
        return self

    def __iter__(self) -> Iterator[PostSummary]:
        return iter(self.root)

    def __len__(self) -> int:
        return len(self.root)

    def __getitem__(self, item: int) -> PostSummary:
        return self.root[item]

    @property
    def urls(self) -> List[str]:
        return [record.url for record in self.root]


def validate_store(records: Iterable[Any]) -> SearchStore:
    """
    Validate a sequence of records (models or plain dicts) as a whole store.
    Raises StoreValidationError listing every problem pydantic reported.
    """
    items = [
        record.model_dump() if isinstance(record, PostSummary) else record
        for record in records
    ]
    try:
        return SearchStore.model_validate(items)
    except ValidationError as e:
        errors = format_errors(e)
        raise StoreValidationError(
            f"search store failed validation ({len(errors)} error(s)): "
            + "; ".join(errors),
            errors=errors,
        ) from e


def format_errors(error: ValidationError) -> List[str]:
    return [_format_error(err) for err in error.errors()]


def _format_error(err: dict) -> str:
    location = ".".join(str(part) for part in err.get("loc", ()))
    message = err.get("msg", "invalid value")
    return f"{location}: {message}" if location else message
