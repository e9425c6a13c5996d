from typing import Optional

from searchstore.repos.posts_repo import FilesystemPostsRepo
from searchstore.services.content_parser import ContentParser
from searchstore.services.posts_service import PostsService
from searchstore.settings import Settings, settings


def get_settings() -> Settings:
    """Small wrapper to allow overrides in tests."""
    return settings


def get_posts_repo(current_settings: Optional[Settings] = None) -> FilesystemPostsRepo:
    current_settings = current_settings or get_settings()
    return FilesystemPostsRepo(
        current_settings.SOURCE_DIR, current_settings.COLLECTIONS
    )


def get_content_parser(current_settings: Optional[Settings] = None) -> ContentParser:
    current_settings = current_settings or get_settings()
    return ContentParser(current_settings.SOURCE_DIR)


def get_posts_service(current_settings: Optional[Settings] = None) -> PostsService:
    current_settings = current_settings or get_settings()
    return PostsService(
        repo=get_posts_repo(current_settings),
        parser=get_content_parser(current_settings),
        current_settings=current_settings,
    )
