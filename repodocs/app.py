"""
RepoDocs web application.
Serves the browser shell and the JSON API it drives: the shell sends its
location fragment, the viewer decodes, fetches, renders and rewires it.
"""

from flask import Flask, render_template, request, jsonify
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from repodocs.core.config import load_config
from repodocs.core.errors import DocumentFetchFailed, DuplicateSourceId, InvalidRepoUrl, SourceNotFound
from repodocs.core.fetcher import GitHubFetcher
from repodocs.core.links import annotate_targets
from repodocs.core.router import NavigationState, decode, document_address
from repodocs.core.sources import SourceRegistry
from repodocs.core.viewer import Viewer
from repodocs.version_info import __version__ as VERSION

logger = logging.getLogger(__name__)

# Status codes for the inline error page returned by /api/view
FETCH_ERROR_STATUS = {'not_found': 404, 'unauthorized': 401, 'other': 502}

def _view_status(page) -> int:
    if isinstance(page.error, SourceNotFound):
        return 404
    if isinstance(page.error, DocumentFetchFailed):
        return FETCH_ERROR_STATUS.get(page.error.kind, 502)
    return 200

def create_app(config: Optional[Dict[str, Any]] = None,
               fetcher: Optional[GitHubFetcher] = None) -> Flask:
    """Build the Flask app. config defaults to load_config() from the working directory."""
    config = config if config is not None else load_config()

    app = Flask(__name__)
    app.config['REPODOCS'] = config
    registry = SourceRegistry(Path(config['registry_file']))
    fetcher = fetcher or GitHubFetcher(config['github_api'], timeout=config['request_timeout'])
    app.extensions['repodocs_registry'] = registry
    app.extensions['repodocs_fetcher'] = fetcher

    @app.context_processor
    def inject_global_context():
        return {'version': VERSION}

    @app.route('/')
    def index():
        """Browser shell; everything else happens through the fragment."""
        return render_template('index.html')

    @app.route('/api/version')
    def get_version():
        return jsonify({'version': VERSION})

    @app.route('/api/route')
    def get_route():
        return jsonify(decode(request.args.get('address', '')).to_dict())

    @app.route('/api/view')
    def view():
        """Render the page for an address: blocks, rewired links and the decoded route."""
        address = request.args.get('address', '')
        # One navigation state per request: the browser owns the real address
        viewer = Viewer(registry, fetcher, NavigationState(address), auto_load=False)
        page = viewer.load_page()
        annotate_targets(page.bindings)
        payload = {
            'kind': page.kind,
            'route': page.route.to_dict(),
            'html': page.html,
            'links': [target for _, target in page.bindings.targets()],
        }
        if page.error is not None:
            payload['error'] = str(page.error)
        return jsonify(payload), _view_status(page)

    @app.route('/api/sources', methods=['GET'])
    def list_sources():
        return jsonify([s.public_dict() for s in registry.list()])

    @app.route('/api/sources', methods=['POST'])
    def add_source():
        """Register a GitHub repository as a documentation source."""
        data = request.get_json(silent=True) or {}
        repo_url = data.get('repo_url')
        if not repo_url:
            return jsonify({'error': 'Missing repo_url'}), 400
        try:
            source = registry.register(
                data.get('name'),
                repo_url,
                ref=data.get('ref') or config.get('default_ref'),
                subdir=data.get('subdir'),
                token=data.get('token'),
            )
        except InvalidRepoUrl as e:
            return jsonify({'error': str(e)}), 400
        except DuplicateSourceId as e:
            return jsonify({'error': str(e)}), 409
        return jsonify({'source': source.public_dict(), 'address': document_address(source.id)}), 201

    @app.route('/api/sources/<source_id>', methods=['DELETE'])
    def delete_source(source_id):
        if registry.remove(source_id):
            return jsonify({'success': True})
        return jsonify({'error': 'Source not found'}), 404

    logger.info(f"RepoDocs app created. Registry: {registry.path}")
    return app
