import logging
from pathlib import Path

from searchstore.exceptions import PostParseError

logger = logging.getLogger(__name__)


class ContentParser:
    def __init__(self, source_dir):
        self.source_dir = Path(source_dir)

    def get_markdown_content(self, doc: dict) -> str:
        """Get the full markdown content from a document (decoded as text)."""
        raw = self._get_raw_content(doc)
        if isinstance(raw, bytes):
            # Undecodable bytes are dropped rather than failing the build
            return raw.decode("utf-8", errors="ignore")
        return raw or ""

    def _get_raw_content(self, doc: dict) -> bytes | None:
        path = self.source_dir / doc["path"]
        try:
            return path.read_bytes()
        except FileNotFoundError:
            logger.warning(f"Source file disappeared: {path}")
            return None
        except OSError as e:
            raise PostParseError(f"Cannot read {doc['path']}: {e}", path=doc["path"]) from e
