import logging
from pathlib import Path
from typing import Iterable, List

from searchstore.exceptions import PostParseError

logger = logging.getLogger(__name__)

DOCUMENT_EXTENSIONS = (".md", ".markdown", ".html")
POSTS_COLLECTION = "posts"


class FilesystemPostsRepo:
    def __init__(self, source_dir, collections: Iterable[str]):
        self.source_dir = Path(source_dir)
        self.collections = list(collections)

    def list_docs(self) -> List[dict]:
        docs = []
        for collection in self.collections:
            docs.extend(self.list_collection_docs(collection))
        return docs

    def list_collection_docs(self, collection: str) -> List[dict]:
        collection_dir = self.source_dir / f"_{collection}"
        if not collection_dir.is_dir():
            logger.warning(f"Collection directory not found: {collection_dir}")
            return []

        docs = []
        for path in sorted(collection_dir.rglob("*"), key=lambda p: p.as_posix()):
            if not path.is_file() or not self._is_document(path, collection_dir):
                continue
            rel_path = path.relative_to(self.source_dir).as_posix()
            # outside _posts, files without front matter are static files
            if collection != POSTS_COLLECTION and not _has_front_matter(path, rel_path):
                logger.debug(f"Skipping static file {rel_path}")
                continue
            docs.append({"_id": rel_path, "path": rel_path, "collection": collection})
        return docs

    @staticmethod
    def _is_document(path: Path, collection_dir: Path) -> bool:
        if path.suffix.lower() not in DOCUMENT_EXTENSIONS:
            return False
        parts = path.relative_to(collection_dir).parts
        return not any(part.startswith(("_", ".")) for part in parts)


def _has_front_matter(path: Path, rel_path: str) -> bool:
    try:
        with path.open("rb") as f:
            first_line = f.readline()
    except OSError as e:
        raise PostParseError(f"Cannot read {rel_path}: {e}", path=rel_path) from e
    return first_line.removeprefix(b"\xef\xbb\xbf").rstrip() == b"---"
