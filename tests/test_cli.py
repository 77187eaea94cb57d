import unittest
import sys
import io
import json
import shutil
import tempfile
from pathlib import Path
from unittest.mock import patch

# Add project root to sys.path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from repodocs import cli

class TestCli(unittest.TestCase):
    def setUp(self):
        self.test_dir = tempfile.mkdtemp()
        self.config_path = str(Path(self.test_dir) / 'repodocs.json')
        patcher = patch('repodocs.core.logging_config.setup_logging')
        patcher.start()
        self.addCleanup(patcher.stop)

    def tearDown(self):
        shutil.rmtree(self.test_dir)

    def run_cli(self, *argv):
        with patch('sys.stdout', new_callable=io.StringIO) as out, \
             patch('sys.stderr', new_callable=io.StringIO) as err:
            code = cli.main(list(argv))
        return code, out.getvalue(), err.getvalue()

    def test_version(self):
        code, out, _ = self.run_cli('--version')
        self.assertEqual(code, 0)
        self.assertIn('RepoDocs v', out)

    def test_route(self):
        code, out, _ = self.run_cli('route', 's/foo/bar')
        self.assertEqual(code, 0)
        self.assertIn("'source_id': 'foo'", out)

    def test_sources_lifecycle(self):
        code, out, _ = self.run_cli('--config', self.config_path, 'sources', 'add', 'Docs', 'https://github.com/o/r')
        self.assertEqual(code, 0)
        self.assertIn("#/s/docs/", out)
        registry_file = Path(self.test_dir) / 'sources.json'
        self.assertEqual(json.loads(registry_file.read_text())[0]['id'], 'docs')

        code, out, _ = self.run_cli('--config', self.config_path, 'sources', 'list')
        self.assertIn('o/r@main', out)

        code, _, err = self.run_cli('--config', self.config_path, 'sources', 'add', 'X', 'not a url')
        self.assertEqual(code, 1)
        self.assertIn('Not a valid GitHub repo URL', err)

        self.assertEqual(self.run_cli('--config', self.config_path, 'sources', 'remove', 'docs')[0], 0)
        self.assertEqual(self.run_cli('--config', self.config_path, 'sources', 'remove', 'docs')[0], 1)

    def test_init_writes_config_once(self):
        self.assertEqual(self.run_cli('--config', self.config_path, 'init')[0], 0)
        self.assertEqual(json.loads(Path(self.config_path).read_text())['default_ref'], 'main')
        self.assertEqual(self.run_cli('--config', self.config_path, 'init')[0], 1)

    def test_start_is_the_default_command(self):
        with patch('flask.Flask.run') as run:
            code, out, _ = self.run_cli('--config', self.config_path, '--host', '127.0.0.1', '--port', '9001')
        self.assertEqual(code, 0)
        self.assertIn('http://127.0.0.1:9001', out)
        run.assert_called_once_with(host='127.0.0.1', port=9001, debug=False)

    def test_start_subcommand_runs_server(self):
        with patch('flask.Flask.run') as run:
            code, _, _ = self.run_cli('--config', self.config_path, '--port', '9002', 'start')
        self.assertEqual(code, 0)
        self.assertEqual(run.call_args.kwargs['port'], 9002)

    def test_view_outline(self):
        self.run_cli('--config', self.config_path, 'sources', 'add', 'Docs', 'https://github.com/o/r')
        with patch('repodocs.core.fetcher.GitHubFetcher.fetch', return_value="# Top\n\n[a](a.md)\n\n## Sub\n"):
            code, out, _ = self.run_cli('--config', self.config_path, 'view', '/s/docs/')
        self.assertEqual(code, 0)
        self.assertIn('Top [2 nodes]', out)
        self.assertIn('  Sub [1 nodes]', out)
        self.assertIn('a.md -> #/s/docs/a', out)

if __name__ == '__main__':
    unittest.main()
