from typing import List, Callable
import markdown
import re
import logging
from bs4 import BeautifulSoup, Comment

logger = logging.getLogger(__name__)

# Only this subset of markup survives rendering; everything else is stripped.
ALLOWED_TAGS = {
    'h1', 'h2', 'h3', 'h4', 'h5', 'h6', 'p', 'br', 'a', 'ul', 'ol', 'li',
    'code', 'pre', 'blockquote', 'strong', 'em', 'hr',
    'table', 'thead', 'tbody', 'tr', 'th', 'td',
}
ALLOWED_ATTRS = {'href'}

# Removed together with their content rather than unwrapped
DROP_CONTENT_TAGS = {
    'script', 'style', 'iframe', 'object', 'embed', 'template',
    'noscript', 'textarea', 'title', 'svg', 'math',
}

# Link schemes that survive sanitizing; fragment and relative hrefs have no scheme
ALLOWED_SCHEMES = {"http", "https", "mailto", "ftp", "tel"}

_URL_SCHEME = re.compile(r"^([a-z][a-z0-9+.\-]*):", re.IGNORECASE)
# Browsers ignore ASCII whitespace and control characters when reading a scheme
_URL_IGNORED_CHARS = re.compile(r"[\x00-\x20\x7f]")

def is_safe_href(href: str) -> bool:
    match = _URL_SCHEME.match(_URL_IGNORED_CHARS.sub("", href))
    return match is None or match.group(1).lower() in ALLOWED_SCHEMES

def strip_toc_markers(md_text: str) -> str:
    return re.sub(r'^\[TOC\]$', '', md_text, flags=re.MULTILINE | re.IGNORECASE)

def strip_front_matter(md_text: str) -> str:
    """Drop a leading YAML front matter block (--- ... ---)."""
    return re.sub(r'\A---\s*\n.*?\n---\s*(\n|\Z)', '', md_text, count=1, flags=re.DOTALL)

PREPROCESS_STEPS: List[Callable[[str], str]] = [strip_front_matter, strip_toc_markers]

def run_pipeline(md_text: str, steps: List[Callable[[str], str]]) -> str:
    out = md_text
    logger.debug(f"Running pipeline with {len(steps)} steps")
    for fn in steps:
        out = fn(out)
    return out

def sanitize_html(html: str) -> str:
    """
    Reduce HTML to the allowed tag and attribute subset.
    Disallowed tags are unwrapped so their text stays readable; active
    content (scripts, styles, frames) is removed outright.
    """
    soup = BeautifulSoup(html, 'html.parser')

    for comment in soup.find_all(string=lambda s: isinstance(s, Comment)):
        comment.extract()

    for tag in soup.find_all(True):
        if tag.decomposed:
            continue
        if tag.name in DROP_CONTENT_TAGS:
            tag.decompose()
            continue
        if tag.name not in ALLOWED_TAGS:
            tag.unwrap()
            continue
        for attr in list(tag.attrs):
            if attr not in ALLOWED_ATTRS:
                del tag[attr]
        href = tag.get('href')
        if href is not None and not is_safe_href(href):
            logger.warning(f"Dropped unsafe href: {href[:40]}")
            del tag['href']

    return str(soup)

def render_markdown(md_text: str) -> str:
    """Markdown -> safe HTML restricted to ALLOWED_TAGS."""
    md_text = run_pipeline(md_text, PREPROCESS_STEPS)

    md_instance = markdown.Markdown(
        extensions=[
            'tables',
            'sane_lists',
            'pymdownx.superfences',
            'pymdownx.magiclink',
            'pymdownx.saneheaders',
            'pymdownx.betterem',
        ],
    )

    logger.debug(f"Render markdown: {len(md_text)} chars input")
    html_output = md_instance.convert(md_text)
    return sanitize_html(html_output)
