import unittest
import sys
import json
import shutil
import tempfile
from pathlib import Path

# Add project root to sys.path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from repodocs.core.errors import DuplicateSourceId, InvalidRepoUrl
from repodocs.core.sources import Source, SourceRegistry, parse_github_url, slugify

class TestParseGitHubUrl(unittest.TestCase):
    def test_valid_urls(self):
        self.assertEqual(parse_github_url("https://github.com/owner/repo"), ("owner", "repo"))
        self.assertEqual(parse_github_url(" https://www.github.com/owner/repo.git "), ("owner", "repo"))
        self.assertEqual(parse_github_url("http://GitHub.com/owner/repo/tree/main/docs"), ("owner", "repo"))

    def test_invalid_urls(self):
        for url in ("", None, "github.com/owner/repo", "https://gitlab.com/o/r",
                    "https://github.com/owner", "ftp://github.com/o/r", "https://github.com.evil.io/o/r"):
            self.assertIsNone(parse_github_url(url), url)

class TestSlugify(unittest.TestCase):
    def test_slugify(self):
        self.assertEqual(slugify("My Docs!"), "my-docs")
        self.assertEqual(slugify("", "Owner", "Repo"), "owner-repo")
        self.assertEqual(slugify("!!!"), "src")

class TestSourceRegistry(unittest.TestCase):
    def setUp(self):
        self.test_dir = tempfile.mkdtemp()
        self.path = Path(self.test_dir) / "sources.json"
        self.registry = SourceRegistry(self.path)

    def tearDown(self):
        shutil.rmtree(self.test_dir)

    def test_missing_file_is_empty(self):
        load = self.registry.load()
        self.assertEqual(load.sources, [])
        self.assertIsNone(load.ignored_error)

    def test_corrupt_file_is_ignored(self):
        self.path.write_text("{not json", encoding="utf-8")
        load = self.registry.load()
        self.assertEqual(load.sources, [])
        self.assertIsNotNone(load.ignored_error)
        self.assertEqual(self.registry.list(), [])

    def test_malformed_entries_are_ignored(self):
        self.path.write_text(json.dumps([{"name": "no id"}]), encoding="utf-8")
        self.assertIsInstance(self.registry.load().ignored_error, KeyError)

    def test_register_and_lookup(self):
        source = self.registry.register("Docs", "https://github.com/o/r", ref="dev", subdir="/docs/", token="  ")
        self.assertEqual(source.id, "docs")
        self.assertEqual(source.subdir, "docs")
        self.assertEqual(source.ref, "dev")
        self.assertIsNone(source.token)
        self.assertEqual(self.registry.get_by_id("docs"), source)
        self.assertIsNone(self.registry.get_by_id("nope"))

    def test_registration_defaults(self):
        source = self.registry.register(None, "https://github.com/o/r")
        self.assertEqual(source.name, "o/r")
        self.assertEqual(source.id, "o-r")
        self.assertEqual(source.ref, "main")

    def test_same_slug_gets_distinct_ids(self):
        first = self.registry.register("docs", "https://github.com/o/r")
        second = self.registry.register("Docs", "https://github.com/o/other")
        third = self.registry.register("DOCS", "https://github.com/o/third")
        self.assertEqual([first.id, second.id, third.id], ["docs", "docs1", "docs2"])

    def test_duplicate_id_rejected(self):
        self.registry.add(Source(id="docs", name="Docs", owner="o", repo="r"))
        with self.assertRaises(DuplicateSourceId):
            self.registry.add(Source(id="docs", name="Other", owner="o", repo="x"))
        self.assertEqual(len(self.registry.list()), 1)

    def test_invalid_url_rejected(self):
        with self.assertRaises(InvalidRepoUrl):
            self.registry.register("Docs", "https://example.com/o/r")

    def test_remove(self):
        self.registry.register("Docs", "https://github.com/o/r")
        self.assertTrue(self.registry.remove("docs"))
        self.assertFalse(self.registry.remove("docs"))
        self.assertEqual(self.registry.list(), [])

    def test_persisted_between_instances(self):
        self.registry.register("Docs", "https://github.com/o/r", token="secret")
        reloaded = SourceRegistry(self.path).get_by_id("docs")
        self.assertEqual(reloaded.token, "secret")

    def test_public_dict_hides_token(self):
        source = Source(id="docs", name="Docs", owner="o", repo="r", token="secret")
        data = source.public_dict()
        self.assertNotIn("token", data)
        self.assertTrue(data["has_token"])

if __name__ == '__main__':
    unittest.main()
