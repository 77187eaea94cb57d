#!/usr/bin/env python
"""
Command-line interface for RepoDocs
"""

import argparse
import sys
from pathlib import Path

from repodocs.version_info import __version__, __build_timestamp__, __build_type__

def print_version():
    """Print version information."""
    print(f"RepoDocs v{__version__}")
    print(f"Build: {__build_timestamp__}")
    print(f"Build Type: {__build_type__}")


def _load(args):
    from repodocs.core.config import load_config
    from repodocs.core.logging_config import setup_logging

    config = load_config(Path(args.config) if args.config else None)
    setup_logging(Path(config['log_dir']) if args.command in ('start', None) else None, debug_mode=args.debug)
    return config


def _registry(config):
    from repodocs.core.sources import SourceRegistry
    return SourceRegistry(Path(config['registry_file']))


def start_server(args, config):
    """Start the Flask server."""
    from repodocs.app import create_app

    app = create_app(config)
    host = args.host
    port = args.port or 8000

    print(f"Starting RepoDocs v{__version__}")
    print(f"Server: http://{host}:{port}")
    print("Press Ctrl+C to stop")
    print()

    app.run(host=host, port=port, debug=args.debug)


def init_config(args):
    """Write a config file with the default settings."""
    from repodocs.core.config import CONFIG_FILE_NAME, DEFAULT_CONFIG, save_config

    target = Path(args.config) if args.config else Path.cwd() / CONFIG_FILE_NAME
    if target.exists():
        print(f"Config already exists: {target}", file=sys.stderr)
        return 1
    save_config(dict(DEFAULT_CONFIG), target)
    print(f"Wrote {target}")
    return 0


def sources_command(args, config):
    from repodocs.core.errors import DuplicateSourceId, InvalidRepoUrl

    registry = _registry(config)
    if args.sources_command == 'add':
        try:
            source = registry.register(args.name, args.url, ref=args.ref or config['default_ref'],
                                       subdir=args.subdir, token=args.token)
        except (InvalidRepoUrl, DuplicateSourceId) as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
        print(f"Added source '{source.id}' -> #/s/{source.id}/")
        return 0

    if args.sources_command == 'remove':
        if registry.remove(args.id):
            print(f"Removed source '{args.id}'")
            return 0
        print(f"Source not found: {args.id}", file=sys.stderr)
        return 1

    sources = registry.list()
    if not sources:
        print("No sources registered.")
    for s in sources:
        location = f"{s.owner}/{s.repo}@{s.ref}" + (f":{s.subdir}" if s.subdir else "")
        print(f"{s.id:<20} {s.name:<30} {location}")
    return 0


def route_command(args):
    from repodocs.core.router import decode
    print(decode(args.address).to_dict())
    return 0


def view_command(args, config):
    """Print the block outline and bound link targets of the page at an address."""
    from repodocs.core.fetcher import GitHubFetcher
    from repodocs.core.router import NavigationState
    from repodocs.core.viewer import Viewer

    fetcher = GitHubFetcher(config['github_api'], timeout=config['request_timeout'])
    viewer = Viewer(_registry(config), fetcher, NavigationState(args.address), auto_load=False)
    page = viewer.load_page()

    if page.error is not None:
        print(f"Error: {page.error}", file=sys.stderr)
        return 1
    for block in page.blocks:
        title = block.heading.get_text(strip=True) if block.heading is not None else "(untitled)"
        print(f"{'  ' * (block.level - 1)}{title} [{len(block.nodes)} nodes]")
    targets = page.bindings.targets()
    if targets:
        print()
        print("Links:")
        for anchor, target in targets:
            print(f"  {anchor.get('href')} -> #{target}")
    return 0


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description=f'RepoDocs v{__version__}',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  repodocs --version                                   Show version information
  repodocs start                                       Start server on 0.0.0.0:8000
  repodocs sources add "My docs" https://github.com/owner/repo --subdir docs
  repodocs view /s/my-docs/guide/setup                 Print a document outline
        """
    )

    parser.add_argument('--version', '-v', action='store_true', help='Show version information')
    parser.add_argument('--config', '-c', type=str, default=None,
                        help='Path to config file (default: ./repodocs.json)')

    default_host = '0.0.0.0'
    parser.add_argument('--host', type=str, default=default_host,
                        help=f'Host to bind to (default: {default_host})')
    parser.add_argument('--port', '-p', type=int, default=8000, help='Port to bind to (default: 8000)')
    parser.add_argument('--debug', '-d', action='store_true', help='Run in debug mode')

    subparsers = parser.add_subparsers(dest='command', help='Available commands')
    subparsers.add_parser('start', help='Start the documentation server')
    subparsers.add_parser('init', help='Write a default config file')

    sources_parser = subparsers.add_parser('sources', help='Manage documentation sources')
    sources_sub = sources_parser.add_subparsers(dest='sources_command')
    sources_sub.add_parser('list', help='List registered sources')
    add_parser = sources_sub.add_parser('add', help='Register a GitHub repository')
    add_parser.add_argument('name', help='Display name (also used to derive the id)')
    add_parser.add_argument('url', help='GitHub repo URL, e.g. https://github.com/owner/repo')
    add_parser.add_argument('--ref', default=None, help='Branch, tag or commit')
    add_parser.add_argument('--subdir', default='', help='Documentation root inside the repo')
    add_parser.add_argument('--token', default=None, help='Access token for private repos')
    remove_parser = sources_sub.add_parser('remove', help='Remove a source')
    remove_parser.add_argument('id', help='Source id')

    route_parser = subparsers.add_parser('route', help='Decode an address')
    route_parser.add_argument('address')
    view_parser = subparsers.add_parser('view', help='Fetch and outline the page at an address')
    view_parser.add_argument('address')

    args = parser.parse_args(argv)

    if args.version:
        print_version()
        return 0

    if args.command == 'init':
        return init_config(args)
    if args.command == 'route':
        return route_command(args)

    config = _load(args)

    if args.command == 'sources':
        return sources_command(args, config)
    if args.command == 'view':
        return view_command(args, config)

    # Default behavior: start the server
    try:
        start_server(args, config)
        return 0
    except KeyboardInterrupt:
        print("\nServer stopped.")
        return 0
    except Exception as e:
        import traceback
        traceback.print_exc()
        print(f"Error starting server: {e}", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
