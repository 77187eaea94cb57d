"""
Page loading: address -> route -> fetched and rendered document -> blocks
and rewired links. Failures become an inline error page.
"""

import html as html_module
import logging
from dataclasses import dataclass, field
from typing import List, Optional

from bs4 import BeautifulSoup

from .blocks import Block, wrap_content_blocks
from .errors import DocumentFetchFailed, RepoDocsError, SourceNotFound
from .fetcher import GitHubFetcher, fetch_markdown
from .links import LinkBindings, LinkContext, rewire
from .renderer import render_markdown
from .router import Landing, NavigationState, Route, decode, document_address
from .sources import SourceRegistry

logger = logging.getLogger(__name__)

@dataclass
class Page:
    kind: str  # 'landing', 'document' or 'error'
    route: Route
    soup: BeautifulSoup
    bindings: LinkBindings
    blocks: List[Block] = field(default_factory=list)
    error: Optional[RepoDocsError] = None

    @property
    def html(self) -> str:
        return str(self.soup)

def landing_html(sources) -> str:
    parts = ["<h1>Docs</h1>"]
    if sources:
        parts.append('<p>Your sources:</p><ul class="source-list">')
        for s in sources:
            parts.append(
                f'<li><a href="#{document_address(s.id)}">{html_module.escape(s.name)}</a> '
                f'<span class="status">({html_module.escape(s.owner)}/{html_module.escape(s.repo)})</span></li>'
            )
        parts.append("</ul>")
    else:
        parts.append("<p>No sources yet. Register a GitHub repository you have access to "
                     "(public, or private with a token).</p>")
    return "".join(parts)

def error_html(message: str, source_id: Optional[str] = None) -> str:
    links = '<a href="#/">Go home</a>'
    if source_id:
        links = f'<a href="#{document_address(source_id)}">Open source root</a> or ' + links
    return (f'<div class="error"><p><strong>Error</strong></p>'
            f'<p>{html_module.escape(message)}</p><p>{links}</p></div>')

class Viewer:
    """
    Renders whatever the navigation state points at. Subscribed to the
    navigation channel, so every navigate() triggers a fresh load; the most
    recently started load wins.
    """

    def __init__(self, registry: SourceRegistry, fetcher: GitHubFetcher,
                 navigation: Optional[NavigationState] = None, auto_load: bool = True):
        self.registry = registry
        self.fetcher = fetcher
        self.navigation = navigation or NavigationState()
        self.current_page: Optional[Page] = None
        self._generation = 0
        if auto_load:
            self.navigation.subscribe(lambda _address: self.load_page())

    def update_content(self, html: str, route: Route, kind: str,
                       context: Optional[LinkContext] = None,
                       error: Optional[RepoDocsError] = None) -> Page:
        """Segment html into blocks and bind its links."""
        soup = BeautifulSoup(html, 'html.parser')
        blocks = wrap_content_blocks(soup)
        bindings = rewire(soup, context, self.navigation)
        return Page(kind=kind, route=route, soup=soup, bindings=bindings, blocks=blocks, error=error)

    def _begin(self) -> int:
        self._generation += 1
        return self._generation

    def _commit(self, generation: int, page: Page) -> Page:
        if generation == self._generation:
            self.current_page = page
        else:
            logger.debug(f"Discarding stale render for {page.route}")
        return page

    def render_route(self, route: Route) -> Page:
        if isinstance(route, Landing):
            return self.update_content(landing_html(self.registry.list()), route, 'landing')

        try:
            md_text = fetch_markdown(self.registry, self.fetcher, route.source_id, route.doc_path)
        except SourceNotFound as e:
            logger.warning(f"Unknown source in route: {route.source_id}")
            return self.update_content(error_html(str(e)), route, 'error', error=e)
        except DocumentFetchFailed as e:
            logger.warning(f"Fetch failed for {route.source_id}/{route.doc_path}: {e}")
            message = f"Document not found or you don't have access. {e}"
            return self.update_content(error_html(message, route.source_id), route, 'error', error=e)

        html = render_markdown(md_text)
        context = LinkContext(source_id=route.source_id, doc_path=route.doc_path)
        return self.update_content(html, route, 'document', context=context)

    def load_page(self, address: Optional[str] = None) -> Page:
        """Load the page for address (default: the current navigation address)."""
        generation = self._begin()
        route = decode(self.navigation.address if address is None else address)
        logger.info(f"Loading {route}")
        page = self.render_route(route)
        return self._commit(generation, page)
