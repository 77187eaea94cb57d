import logging
from typing import Optional
from urllib.parse import quote

import requests

from .errors import DocumentFetchFailed, SourceNotFound
from .paths import build_content_path, path_to_file
from .sources import SourceRegistry

logger = logging.getLogger(__name__)

GITHUB_API = "https://api.github.com"
DEFAULT_TIMEOUT = 15

class GitHubFetcher:
    """Retrieves raw file contents through the GitHub contents API."""

    def __init__(self, api_base: str = GITHUB_API, timeout: float = DEFAULT_TIMEOUT,
                 session: Optional[requests.Session] = None):
        self.api_base = api_base.rstrip('/')
        self.timeout = timeout
        self.session = session or requests.Session()

    def file_url(self, owner: str, repo: str, path: str) -> str:
        return f"{self.api_base}/repos/{quote(owner, safe='')}/{quote(repo, safe='')}/contents/{quote(path, safe='/')}"

    def fetch(self, owner: str, repo: str, ref: str, path: str, token: Optional[str] = None) -> str:
        headers = {'Accept': 'application/vnd.github.raw'}
        if token:
            headers['Authorization'] = f"Bearer {token}"
        url = self.file_url(owner, repo, path)
        logger.info(f"Fetching {owner}/{repo}@{ref}:{path}")
        try:
            response = self.session.get(url, params={'ref': ref}, headers=headers, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error(f"Request for {url} failed: {e}")
            raise DocumentFetchFailed('other', detail=str(e)) from e

        if response.status_code == 404:
            raise DocumentFetchFailed('not_found', status=404)
        if response.status_code == 401:
            raise DocumentFetchFailed('unauthorized', status=401)
        if not response.ok:
            logger.warning(f"GitHub returned {response.status_code} for {url}")
            raise DocumentFetchFailed('other', status=response.status_code)
        return response.text

def fetch_markdown(registry: SourceRegistry, fetcher: GitHubFetcher, source_id: str, doc_path: str) -> str:
    """Look up the source and fetch the Markdown text of one of its documents."""
    src = registry.get_by_id(source_id)
    if src is None:
        raise SourceNotFound(source_id)
    content_path = build_content_path(src.subdir, path_to_file(doc_path))
    return fetcher.fetch(src.owner, src.repo, (src.ref or "").strip() or "HEAD", content_path, src.token)
