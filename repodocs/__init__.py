"""
RepoDocs - browse Markdown documentation stored in GitHub repositories.
"""

from repodocs.version_info import __version__
