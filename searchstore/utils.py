import re
from urllib.parse import urlparse

import markdown
from bs4 import BeautifulSoup

ELLIPSIS = "..."


_LIQUID_RAW = re.compile(r"{%-?\s*raw\s*-?%}(.*?){%-?\s*endraw\s*-?%}", re.DOTALL)
_LIQUID_COMMENT = re.compile(
    r"{%-?\s*comment\s*-?%}.*?{%-?\s*endcomment\s*-?%}", re.DOTALL
)
_LIQUID_TAG = re.compile(r"{%.*?%}", re.DOTALL)
_LIQUID_OUTPUT = re.compile(r"{{.*?}}", re.DOTALL)


def strip_liquid(text: str) -> str:
    """
    Drop Liquid tags and output markup, keeping the text between block tags
    (code inside highlight blocks stays). Raw blocks are kept verbatim.
    """
    parts = _LIQUID_RAW.split(text or "")
    # odd indexes are raw block bodies
    for i in range(0, len(parts), 2):
        chunk = _LIQUID_COMMENT.sub("", parts[i])
        chunk = _LIQUID_TAG.sub("\n", chunk)
        parts[i] = _LIQUID_OUTPUT.sub("", chunk)
    return "".join(parts)


def render_markdown(text: str) -> str:
    return markdown.markdown(text or "", extensions=["fenced_code", "tables"])


def strip_html(raw_html: str) -> str:
    text = BeautifulSoup(raw_html or "", "html.parser").get_text()
    return collapse_whitespace(text)


def collapse_whitespace(text: str) -> str:
    return re.sub(r"\s+", " ", text or "").strip()


def markdown_to_text(text: str) -> str:
    """Render markdown and reduce it to a single line of plain text."""
    return strip_html(render_markdown(text))


def truncate_words(text: str, limit: int, marker: str = ELLIPSIS) -> str:
    words = (text or "").split()
    if limit < 1:
        limit = 1
    if len(words) <= limit:
        return " ".join(words)
    return " ".join(words[:limit]) + marker


def absolute_url(path: str, site_root: str) -> str:
    """Join a site-relative path onto the site root; absolute urls pass through."""
    parsed = urlparse(path)
    if parsed.scheme and parsed.netloc:
        return path
    if path.startswith("//"):
        scheme = urlparse(site_root).scheme or "http"
        return f"{scheme}:{path}"
    return f"{site_root.rstrip('/')}/{path.lstrip('/')}"
