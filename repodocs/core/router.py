"""
Address decoding and navigation state.

The whole application state lives in one address string (the location
fragment in the browser shell). Routes are derived from it on every change.
"""

import logging
from dataclasses import dataclass
from typing import Callable, List, Union

from .paths import DEFAULT_PATH, sanitize_path

logger = logging.getLogger(__name__)

# First address segment marking a document route: /s/<source-id>/<doc-path>
SOURCE_MARKER = "s"

@dataclass(frozen=True)
class Landing:
    type = "landing"

    def to_dict(self):
        return {'type': self.type}

@dataclass(frozen=True)
class DocumentRoute:
    source_id: str
    doc_path: str = DEFAULT_PATH
    type = "source"

    def to_dict(self):
        return {'type': self.type, 'source_id': self.source_id, 'doc_path': self.doc_path}

Route = Union[Landing, DocumentRoute]

def path_from_address(address: str) -> str:
    """Strip the fragment marker, surrounding slashes and whitespace."""
    path = (address or "").strip()
    if path.startswith('#'):
        path = path[1:]
    return path.strip().strip('/').strip() or DEFAULT_PATH

def decode(address: str) -> Route:
    """Map an address onto a Route. Unrecognized shapes degrade to Landing."""
    parts = [p for p in path_from_address(address).split('/') if p]
    if len(parts) >= 2 and parts[0] == SOURCE_MARKER:
        doc_path = '/'.join(parts[2:])
        return DocumentRoute(
            source_id=parts[1],
            doc_path=sanitize_path(doc_path) if doc_path else DEFAULT_PATH,
        )
    return Landing()

def document_address(source_id: str, doc_path: str = "") -> str:
    """Inverse of decode for document routes."""
    return f"/{SOURCE_MARKER}/{source_id}/{doc_path}"

class NavigationState:
    """
    Holder of the current address plus the change-of-address event channel.
    Subscribers are called with the new address after every navigate().
    """

    def __init__(self, address: str = ""):
        self._address = address
        self._subscribers: List[Callable[[str], None]] = []

    @property
    def address(self) -> str:
        return self._address

    @property
    def route(self) -> Route:
        return decode(self._address)

    def subscribe(self, callback: Callable[[str], None]) -> Callable[[], None]:
        """Register a listener and return a function that removes it."""
        self._subscribers.append(callback)

        def unsubscribe():
            if callback in self._subscribers:
                self._subscribers.remove(callback)
        return unsubscribe

    def navigate(self, address: str) -> None:
        """Set the address and emit it. Re-navigating to the same address emits again."""
        logger.debug(f"Navigate: {self._address!r} -> {address!r}")
        self._address = address
        for callback in list(self._subscribers):
            callback(address)
