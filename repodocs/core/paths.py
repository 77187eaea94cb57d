import re
import logging

logger = logging.getLogger(__name__)

# Document shown when an address or link names no document
DEFAULT_PATH = "index"
MARKDOWN_SUFFIX = ".md"

_UNSAFE_CHARS = re.compile(r'[^a-zA-Z0-9/\-_.]')

def _sanitize_once(path: str) -> str:
    path = path.replace('..', '')
    path = re.sub(r'/+', '/', path)
    path = re.sub(r'^/|/$', '', path)
    return _UNSAFE_CHARS.sub('', path)

def sanitize_path(raw: str) -> str:
    """
    Canonicalize an author or user supplied path into a safe relative path.

    '..' is stripped textually anywhere in the string (so 'a..b' becomes 'ab'),
    slash runs collapse, one leading and trailing slash is removed and any
    character outside [A-Za-z0-9/_.-] is dropped. Dropping characters can
    expose a new '..' (e.g. '.%.'), so the rules repeat until nothing changes.
    Empty results fall back to DEFAULT_PATH.
    """
    path = raw or ""
    while True:
        cleaned = _sanitize_once(path)
        if cleaned == path:
            break
        path = cleaned
    if path != raw:
        logger.debug(f"Sanitized path {raw!r} -> {path!r}")
    return path or DEFAULT_PATH

def path_to_file(path: str) -> str:
    """Sanitized path with the '.md' suffix the repository file carries."""
    p = sanitize_path(path or DEFAULT_PATH)
    return p if p.endswith(MARKDOWN_SUFFIX) else p + MARKDOWN_SUFFIX

def build_content_path(subdir: str, file_path: str) -> str:
    """Prefix a document file path with the source's subdirectory, if any."""
    sub = (subdir or "").strip().rstrip('/')
    return f"{sub}/{file_path}" if sub else file_path
