import logging
from pathlib import Path
from typing import Optional, Union

from searchstore.dependencies import get_posts_service
from searchstore.schemas.store import SearchStore, validate_store
from searchstore.services.store_codec import write_store
from searchstore.settings import Settings, settings

logger = logging.getLogger(__name__)


def build_store(posts_service) -> SearchStore:
    """Collect every searchable document and validate them as one store."""
    summaries = posts_service.list_summaries()
    store = validate_store(summaries)
    logger.info(f"Built search store with {len(store)} records")
    return store


def generate(
    current_settings: Optional[Settings] = None,
    output: Optional[Union[str, Path]] = None,
    *,
    posts_service=None,
) -> SearchStore:
    """Build the store from the configured sources and write it to disk."""
    current_settings = current_settings or settings
    posts_service = posts_service or get_posts_service(current_settings)

    store = build_store(posts_service)
    write_store(
        store,
        output or current_settings.output_file,
        variable=current_settings.STORE_VARIABLE,
    )
    return store
