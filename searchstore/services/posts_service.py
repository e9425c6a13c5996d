import datetime
import logging
import re
from pathlib import PurePosixPath
from typing import List, Optional

import frontmatter
from pydantic import ValidationError

from searchstore.exceptions import PostParseError, StoreValidationError
from searchstore.schemas.store import STORE_FIELDS, PostSummary, format_errors
from searchstore.settings import Settings, settings
from searchstore.utils import (
    absolute_url,
    collapse_whitespace,
    markdown_to_text,
    strip_html,
    strip_liquid,
    truncate_words,
)

logger = logging.getLogger(__name__)

_DATED_FILENAME = re.compile(r"^(?P<date>\d{4}-\d{2}-\d{2})-(?P<slug>.+)$")

PERMALINK_STYLES = {
    "date": "/:categories/:year/:month/:day/:title:output_ext",
    "pretty": "/:categories/:year/:month/:day/:title/",
    "ordinal": "/:categories/:year/:y_day/:title:output_ext",
    "none": "/:categories/:title:output_ext",
}

_DATE_FORMATS = (
    "%Y-%m-%d %H:%M:%S %z",
    "%Y-%m-%d %H:%M %z",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d %H:%M",
    "%Y-%m-%d",
)


class PostsService:
    def __init__(self, repo, parser, current_settings: Optional[Settings] = None):
        self.repo = repo
        self.parser = parser
        self.settings = current_settings or settings

    def list_summaries(self) -> List[PostSummary]:
        docs = self.repo.list_docs()
        posts = []
        for doc in docs:
            post_data = parse_post_data(
                doc, parser=self.parser, current_settings=self.settings
            )
            if post_data:
                posts.append(post_data)

        collection_order = {name: i for i, name in enumerate(self.settings.COLLECTIONS)}
        posts.sort(
            key=lambda p: (collection_order.get(p["collection"], len(collection_order)), p["path"])
        )
        # stable sort: equal dates keep collection then path order
        posts.sort(key=lambda p: p["date"] or datetime.datetime.min, reverse=True)

        logger.info(f"Collected {len(posts)} searchable documents out of {len(docs)}")
        return [to_summary(p) for p in posts]


def to_summary(post_data: dict) -> PostSummary:
    try:
        return PostSummary(**{field: post_data.get(field) for field in STORE_FIELDS})
    except ValidationError as e:
        errors = format_errors(e)
        raise StoreValidationError(
            f"Invalid search record for {post_data.get('path')}: " + "; ".join(errors),
            errors=errors,
        ) from e


def parse_post_data(
    doc: dict, *, parser, current_settings: Optional[Settings] = None
) -> Optional[dict]:
    """Parse frontmatter and return the search record fields for one document"""
    current_settings = current_settings or settings
    path = doc["path"]

    markdown = parser.get_markdown_content(doc)
    if not markdown or not markdown.strip():
        logger.warning(f"No content found for {path}")
        return None

    try:
        parsed = frontmatter.loads(markdown)
    except Exception as e:
        raise PostParseError(f"Malformed front matter in {path}: {e}", path=path) from e
    metadata = parsed.metadata or {}

    if metadata.get("search") is False or metadata.get("published") is False:
        logger.debug(f"Excluded from search: {path}")
        return None

    collection = doc.get("collection", "posts")
    file_date, slug = _split_filename(path)
    date = _parse_date(metadata.get("date"), path) or file_date
    slug = str(metadata.get("slug") or slug)

    categories = _normalize_labels(metadata.get("categories"), metadata.get("category"))
    tags = _normalize_labels(metadata.get("tags"), metadata.get("tag"))

    permalink = metadata.get("permalink") or _default_permalink(
        collection, current_settings
    )
    try:
        url_path = render_permalink(
            str(permalink),
            slug=slug,
            collection=collection,
            date=date,
            categories=categories,
        )
    except ValueError as e:
        raise PostParseError(f"Cannot build url for {path}: {e}", path=path) from e

    return {
        "title": _derive_title(metadata, slug),
        "excerpt": build_excerpt(
            parsed.content,
            words=current_settings.EXCERPT_WORDS,
            full_content=current_settings.SEARCH_FULL_CONTENT,
            is_html=path.lower().endswith(".html"),
        ),
        "categories": categories,
        "tags": tags,
        "url": absolute_url(url_path, current_settings.site_root),
        "teaser": _derive_teaser(metadata, current_settings),
        "date": date,
        "collection": collection,
        "path": path,
    }


def build_excerpt(
    content: str, words: int = 50, full_content: bool = False, is_html: bool = False
) -> str:
    content = strip_liquid(content)
    text = strip_html(content) if is_html else markdown_to_text(content)
    if full_content:
        return collapse_whitespace(text)
    return truncate_words(text, words)


def render_permalink(
    pattern: str,
    *,
    slug: str,
    collection: str,
    date: Optional[datetime.datetime],
    categories: List[str],
) -> str:
    pattern = PERMALINK_STYLES.get(pattern, pattern)
    values = {
        "title": slug,
        "name": slug,
        "slug": slug,
        "collection": collection,
        "categories": "/".join(_slugify(c) for c in categories),
        "output_ext": ".html",
    }
    if date:
        values.update(
            {
                "year": f"{date.year:04d}",
                "month": f"{date.month:02d}",
                "day": f"{date.day:02d}",
                "i_month": str(date.month),
                "i_day": str(date.day),
                "y_day": f"{date.timetuple().tm_yday:03d}",
            }
        )

    def _replace(match: re.Match) -> str:
        key = match.group(1)
        if key not in values:
            raise ValueError(f"placeholder :{key} has no value")
        return values[key]

    rendered = re.sub(r":([a-z_]+)", _replace, pattern)
    rendered = re.sub(r"/{2,}", "/", rendered)
    return rendered if rendered.startswith("/") else f"/{rendered}"


def _default_permalink(collection: str, current_settings: Settings) -> str:
    if collection == "posts":
        return current_settings.PERMALINK
    return "/:collection/:title/"


def _split_filename(path: str):
    stem = PurePosixPath(path).stem
    match = _DATED_FILENAME.match(stem)
    if not match:
        return None, stem
    try:
        date = datetime.datetime.strptime(match.group("date"), "%Y-%m-%d")
    except ValueError:
        return None, stem
    return date, match.group("slug")


def _parse_date(value, path: str) -> Optional[datetime.datetime]:
    if value is None:
        return None
    if isinstance(value, datetime.datetime):
        return _naive(value)
    if isinstance(value, datetime.date):
        return datetime.datetime.combine(value, datetime.time())
    text = str(value).strip()
    for fmt in _DATE_FORMATS:
        try:
            return _naive(datetime.datetime.strptime(text, fmt))
        except ValueError:
            continue
    logger.warning(f"Unrecognized date {text!r} in {path}, using filename date")
    return None


def _naive(value: datetime.datetime) -> datetime.datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(datetime.timezone.utc).replace(tzinfo=None)


def _derive_title(metadata: dict, slug: str) -> str:
    if metadata and metadata.get("title"):
        return str(metadata["title"])
    clean_slug = slug.replace("-", " ").replace("_", " ")
    return clean_slug.title()


def _derive_teaser(metadata: dict, current_settings: Settings) -> Optional[str]:
    header = metadata.get("header")
    teaser = header.get("teaser") if isinstance(header, dict) else None
    teaser = teaser or current_settings.TEASER
    if not teaser:
        return None
    return absolute_url(str(teaser), current_settings.site_root)


def _normalize_labels(value, singular=None) -> List[str]:
    """Jekyll accepts a list or a space separated string for tags/categories."""
    labels: List[str] = []
    if isinstance(value, str):
        labels.extend(value.split())
    elif isinstance(value, (list, tuple, set)):
        labels.extend(str(item).strip() for item in value if item is not None)
    elif value is not None:
        labels.append(str(value))
    if singular:
        labels.append(str(singular).strip())

    seen = set()
    result = []
    for label in labels:
        if label and label not in seen:
            seen.add(label)
            result.append(label)
    return result


def _slugify(value: str) -> str:
    slug = re.sub(r"[^\w]+", "-", value.lower()).strip("-")
    return slug
