import textwrap

import pytest

from searchstore.settings import Settings


class FakeRepo:
    """
    Minimal repo stand-in used in service tests.
    """

    def __init__(self, docs):
        self.docs = docs

    def list_docs(self):
        return list(self.docs)


class FakeParser:
    """
    Minimal markdown/content parser stand-in.
    """

    def __init__(self, content_by_id: dict[str, str]):
        self.content_by_id = content_by_id

    def get_markdown_content(self, doc: dict) -> str | None:
        raw = self.content_by_id.get(doc.get("_id"))
        if raw is None:
            return None
        return textwrap.dedent(raw).lstrip()


class FakePostsService:
    """
    Minimal posts service stand-in for builder and CLI tests.
    """

    def __init__(self, summaries=None):
        self.summaries = summaries or []
        self.calls = 0

    def list_summaries(self):
        self.calls += 1
        return list(self.summaries)


def make_doc(path: str, collection: str = "posts") -> dict:
    return {"_id": path, "path": path, "collection": collection}


def write_source(root, rel_path: str, text: str):
    path = root / rel_path
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(textwrap.dedent(text).lstrip(), encoding="utf-8")
    return path


@pytest.fixture
def site_settings(tmp_path):
    return Settings(
        SOURCE_DIR=str(tmp_path),
        COLLECTIONS=["posts"],
        SITE_URL="http://localhost:4000",
        BASE_PATH="",
        PERMALINK="/:title/",
        TEASER=None,
        EXCERPT_WORDS=50,
        SEARCH_FULL_CONTENT=False,
    )
