"""
Registered documentation sources.

A source is a GitHub repository (optionally a subdirectory of it at a given
ref) whose Markdown files the viewer presents. Sources are kept in a JSON
file; an unreadable file is treated as an empty registry, never an error.
"""

import json
import logging
import re
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import urlparse

from .errors import DuplicateSourceId, InvalidRepoUrl

logger = logging.getLogger(__name__)

DEFAULT_REF = "main"

_GITHUB_HOST = re.compile(r'^(www\.)?github\.com$', re.IGNORECASE)

@dataclass
class Source:
    id: str
    name: str
    owner: str
    repo: str
    ref: str = DEFAULT_REF
    subdir: str = ""
    token: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Source":
        return cls(
            id=data['id'],
            name=data.get('name') or data['id'],
            owner=data['owner'],
            repo=data['repo'],
            ref=data.get('ref') or DEFAULT_REF,
            subdir=data.get('subdir') or "",
            token=data.get('token') or None,
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def public_dict(self) -> Dict[str, Any]:
        """Serializable view without the credential."""
        data = self.to_dict()
        data['has_token'] = bool(data.pop('token'))
        return data

@dataclass
class RegistryLoad:
    """
    Outcome of reading the registry file. A failed read still yields a usable
    (empty) list; the swallowed exception is kept in ignored_error.
    """
    sources: List[Source] = field(default_factory=list)
    ignored_error: Optional[Exception] = None

def parse_github_url(url: str) -> Optional[Tuple[str, str]]:
    """'https://github.com/owner/repo(.git)' -> (owner, repo), None if not a GitHub repo URL."""
    s = (url or "").strip()
    if not s:
        return None
    try:
        parsed = urlparse(s)
    except ValueError:
        return None
    if parsed.scheme not in ('http', 'https') or not _GITHUB_HOST.match(parsed.netloc or ''):
        return None
    path = re.sub(r'^/+|/+$|\.git$', '', parsed.path)
    parts = [p for p in path.split('/') if p]
    if len(parts) < 2:
        return None
    return parts[0], parts[1]

def slugify(name: Optional[str], owner: str = "", repo: str = "") -> str:
    base = name or f"{owner}/{repo}"
    slug = re.sub(r'[^a-z0-9]+', '-', base.lower())
    slug = re.sub(r'^-|-$', '', slug)
    return slug or "src"

class SourceRegistry:
    """JSON-file backed store of Source records."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def load(self) -> RegistryLoad:
        if not self.path.exists():
            return RegistryLoad()
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                raw = json.load(f)
            sources = [Source.from_dict(item) for item in raw]
            return RegistryLoad(sources=sources)
        except Exception as e:
            logger.warning(f"Ignoring unreadable source registry {self.path}: {e}")
            return RegistryLoad(ignored_error=e)

    def _save(self, sources: List[Source]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, 'w', encoding='utf-8') as f:
            json.dump([s.to_dict() for s in sources], f, indent=2)

    def list(self) -> List[Source]:
        return self.load().sources

    def get_by_id(self, source_id: str) -> Optional[Source]:
        return next((s for s in self.list() if s.id == source_id), None)

    def slug_id(self, name: Optional[str], owner: str = "", repo: str = "") -> str:
        """Slug for name (or owner/repo), suffixed with a number until unique."""
        slug = slugify(name, owner, repo)
        taken = {s.id for s in self.list()}
        source_id = slug
        n = 0
        while source_id in taken:
            n += 1
            source_id = f"{slug}{n}"
        return source_id

    def add(self, source: Source) -> Source:
        sources = self.list()
        if any(s.id == source.id for s in sources):
            raise DuplicateSourceId(source.id)
        sources.append(source)
        self._save(sources)
        logger.info(f"Source added: {source.id} ({source.owner}/{source.repo})")
        return source

    def remove(self, source_id: str) -> bool:
        sources = self.list()
        remaining = [s for s in sources if s.id != source_id]
        if len(remaining) == len(sources):
            return False
        self._save(remaining)
        logger.info(f"Source removed: {source_id}")
        return True

    def register(self, name: Optional[str], repo_url: str, ref: Optional[str] = None,
                 subdir: Optional[str] = None, token: Optional[str] = None) -> Source:
        """Create a Source from registration form values and add it."""
        parsed = parse_github_url(repo_url)
        if not parsed:
            raise InvalidRepoUrl(repo_url)
        owner, repo = parsed
        name = (name or f"{owner}/{repo}").strip()
        source = Source(
            id=self.slug_id(name, owner, repo),
            name=name,
            owner=owner,
            repo=repo,
            ref=(ref or DEFAULT_REF).strip() or DEFAULT_REF,
            subdir=(subdir or "").strip().strip('/'),
            token=(token or "").strip() or None,
        )
        return self.add(source)
