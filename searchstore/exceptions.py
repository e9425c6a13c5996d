"""Errors raised while generating or loading the search store."""

from typing import List, Optional


class StoreError(Exception):
    """Base class for everything that should fail a store build."""


class StoreValidationError(StoreError):
    """Raised when a record or the record sequence breaks the store contract."""

    def __init__(self, message: str, errors: Optional[List[str]] = None):
        super().__init__(message)
        self.errors = errors or []


class StoreFormatError(StoreError):
    """Raised when loaded text is not a serialized store."""


class PostParseError(StoreError):
    """Raised when a source document's front matter cannot be parsed."""

    def __init__(self, message: str, path: str):
        super().__init__(message)
        self.path = path
