from typing import Optional

class RepoDocsError(Exception):
    """Base class for errors shown to the user as an inline error view."""

class SourceNotFound(RepoDocsError):
    def __init__(self, source_id: str):
        self.source_id = source_id
        super().__init__(f"Source not found: {source_id}")

class DocumentFetchFailed(RepoDocsError):
    """
    Remote document could not be retrieved.
    kind is one of 'not_found', 'unauthorized' or 'other'.
    """
    MESSAGES = {
        'not_found': "Not found",
        'unauthorized': "Unauthorized (check token)",
        'other': "Request failed",
    }

    def __init__(self, kind: str, status: Optional[int] = None, detail: str = ""):
        if kind not in self.MESSAGES:
            kind = 'other'
        self.kind = kind
        self.status = status
        self.detail = detail
        super().__init__(self.MESSAGES[kind])

class DuplicateSourceId(RepoDocsError):
    def __init__(self, source_id: str):
        self.source_id = source_id
        super().__init__("A source with that id already exists.")

class InvalidRepoUrl(RepoDocsError):
    def __init__(self, url: str):
        self.url = url
        super().__init__("Not a valid GitHub repo URL (e.g. https://github.com/owner/repo).")
