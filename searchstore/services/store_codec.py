import json
import logging
import re
from pathlib import Path
from typing import Union

from searchstore.exceptions import StoreFormatError
from searchstore.schemas.store import STORE_FIELDS, PostSummary, SearchStore, validate_store

logger = logging.getLogger(__name__)

_ASSIGNMENT_PATTERN = re.compile(
    r"^\s*(?:var|let|const)\s+(?P<name>[A-Za-z_$][\w$]*)\s*=\s*(?P<body>.*?)\s*;?\s*$",
    re.DOTALL,
)
_IDENTIFIER_PATTERN = re.compile(r"^[A-Za-z_$][\w$]*$")


def record_to_dict(record: PostSummary) -> dict:
    """Every field is emitted, teaser included when it is null."""
    data = record.model_dump()
    return {field: data[field] for field in STORE_FIELDS}


def dumps_store(store: SearchStore, variable: str = "store") -> str:
    if not _IDENTIFIER_PATTERN.match(variable):
        raise ValueError(f"Not a JavaScript identifier: {variable!r}")

    records = [
        json.dumps(record_to_dict(record), ensure_ascii=False) for record in store
    ]
    if not records:
        return f"var {variable} = [];\n"
    body = ",\n  ".join(records)
    return f"var {variable} = [\n  {body}\n];\n"


def loads_store(text: str) -> SearchStore:
    """
    Parse a serialized store. Accepts the `var store = [...]` script form
    or a bare JSON array, and validates the records it contains.
    """
    if not text or not text.strip():
        raise StoreFormatError("Store text is empty")

    match = _ASSIGNMENT_PATTERN.match(text)
    body = match.group("body") if match else text.strip()

    try:
        data = json.loads(body)
    except json.JSONDecodeError as e:
        raise StoreFormatError(f"Store is not valid JSON: {e}") from e

    if not isinstance(data, list):
        raise StoreFormatError(
            f"Store must be an array of records, got {type(data).__name__}"
        )

    for index, item in enumerate(data):
        if not isinstance(item, dict):
            raise StoreFormatError(
                f"Record {index} must be an object, got {type(item).__name__}"
            )

    return validate_store(data)


def load_store(path: Union[str, Path]) -> SearchStore:
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise StoreFormatError(f"Store file not found: {path}") from e
    store = loads_store(text)
    logger.debug(f"Loaded {len(store)} records from {path}")
    return store


def write_store(
    store: SearchStore, path: Union[str, Path], variable: str = "store"
) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(dumps_store(store, variable=variable), encoding="utf-8")
    logger.info(f"Wrote {len(store)} records to {path}")
    return path
