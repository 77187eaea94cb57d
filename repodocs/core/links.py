"""
Relative link resolution and in-document link rewiring.

Links inside a rendered document are written relative to the document's own
location in its repository. They are resolved here and bound to navigation
events so that clicking them changes the application address instead of
leaving the page.
"""

import re
import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple

from bs4 import Tag

from .paths import DEFAULT_PATH
from .router import NavigationState, document_address

logger = logging.getLogger(__name__)

# Hrefs starting with this marker are addresses inside the app (e.g. '#/s/docs/')
APP_LINK_PREFIX = "#/"

_URL_SCHEME = re.compile(r"^[a-z][a-z0-9+.\-]*:", re.IGNORECASE)

def is_relative_document_link(href: str) -> bool:
    """True for hrefs that resolve against the current document's directory."""
    return bool(href) and not href.startswith(("#", "/")) and not _URL_SCHEME.match(href)

def resolve_relative_link(base_path: str, href: str) -> str:
    """
    Resolve href against the document at base_path.

    Empty, fragment, 'http...' and '/'-absolute hrefs come back unchanged.
    '..' never climbs above the source root and a trailing '.md' is dropped
    because addresses carry no suffix.
    """
    if not href or href.startswith(('#', 'http', '/')):
        return href
    base_path = base_path or ''
    base = base_path.rsplit('/', 1)[0] if '/' in base_path else ''
    segments = [s for s in f"{base}/{href}".split('/') if s]
    out: List[str] = []
    for segment in segments:
        if segment == '..':
            if out:
                out.pop()
        elif segment != '.':
            out.append(segment)
    return re.sub(r'\.md$', '', '/'.join(out), flags=re.IGNORECASE) or DEFAULT_PATH

@dataclass(frozen=True)
class LinkContext:
    """Where the links being rewired live: a source and a document path."""
    source_id: Optional[str] = None
    doc_path: str = DEFAULT_PATH

def plan_link(href: str, context: Optional[LinkContext] = None) -> Optional[str]:
    """
    Decide where clicking href should take the app.
    Returns the target address, or None to leave the link as an ordinary one.
    """
    if not href:
        return None
    if href.startswith(APP_LINK_PREFIX):
        return href[1:]
    if context is None or not context.source_id:
        return None
    if not is_relative_document_link(href):
        return None
    resolved = resolve_relative_link(context.doc_path or DEFAULT_PATH, href)
    return document_address(context.source_id, resolved)

class LinkBindings:
    """
    Click handlers attached to anchors of one rendered tree.
    A handler returns True when it prevented the default navigation.
    """

    def __init__(self):
        self._handlers: Dict[int, Tuple[Tag, Callable[[], bool], str]] = {}

    def __len__(self):
        return len(self._handlers)

    def __contains__(self, anchor: Tag) -> bool:
        return id(anchor) in self._handlers

    def bind(self, anchor: Tag, handler: Callable[[], bool], target: str) -> bool:
        """Attach handler unless the anchor already has one. Returns True if attached."""
        if anchor in self:
            return False
        self._handlers[id(anchor)] = (anchor, handler, target)
        return True

    def handler_count(self, anchor: Tag) -> int:
        return 1 if anchor in self else 0

    def target(self, anchor: Tag) -> Optional[str]:
        entry = self._handlers.get(id(anchor))
        return entry[2] if entry else None

    def targets(self) -> List[Tuple[Tag, str]]:
        return [(anchor, target) for anchor, _, target in self._handlers.values()]

    def click(self, anchor: Tag) -> bool:
        """Simulate a click. Returns True if default navigation was prevented."""
        entry = self._handlers.get(id(anchor))
        if entry is None:
            return False
        return entry[1]()

def _navigate_handler(navigation: NavigationState, target: str) -> Callable[[], bool]:
    def handler():
        navigation.navigate(target)
        return True
    return handler

def rewire(root: Tag, context: Optional[LinkContext], navigation: NavigationState,
           bindings: Optional[LinkBindings] = None) -> LinkBindings:
    """
    Bind every in-app or same-source relative anchor under root to a navigation.
    href attributes are left untouched. Anchors already present in bindings
    are skipped, so running this twice adds nothing.
    """
    if bindings is None:
        bindings = LinkBindings()
    for a_tag in root.find_all('a', href=True):
        href = a_tag.get('href', '')
        target = plan_link(href, context)
        if target is None:
            continue
        if bindings.bind(a_tag, _navigate_handler(navigation, target), target):
            logger.debug(f"Bound link {href} -> {target}")
    return bindings

def annotate_targets(bindings: LinkBindings) -> None:
    """Expose bound targets to the browser shell as data-address attributes."""
    for anchor, target in bindings.targets():
        anchor['data-address'] = target
