import unittest
import sys
from pathlib import Path

# Add project root to sys.path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from bs4 import BeautifulSoup

from repodocs.core.blocks import heading_level, segment, top_level_nodes, wrap_content_blocks

def nodes_of(html):
    return top_level_nodes(BeautifulSoup(html, 'html.parser'))

def names(block):
    return [getattr(n, 'name', None) for n in block.nodes]

class TestSegment(unittest.TestCase):
    def test_empty(self):
        self.assertEqual(segment([]), [])

    def test_heading_blocks(self):
        blocks = segment(nodes_of("<h1>A</h1><p>1</p><p>2</p><h2>B</h2><p>3</p>"))
        self.assertEqual(len(blocks), 2)
        self.assertEqual(names(blocks[0]), ['h1', 'p', 'p'])
        self.assertEqual(names(blocks[1]), ['h2', 'p'])
        self.assertEqual([b.level for b in blocks], [1, 2])
        self.assertEqual(blocks[1].heading.get_text(), "B")

    def test_leading_content_gets_headingless_block(self):
        blocks = segment(nodes_of("<p>intro</p><h3>C</h3>"))
        self.assertEqual(len(blocks), 2)
        self.assertIsNone(blocks[0].heading)
        self.assertEqual(blocks[0].level, 1)
        self.assertEqual(blocks[1].level, 3)

    def test_consecutive_headings(self):
        blocks = segment(nodes_of("<h2>A</h2><h2>B</h2><h6>C</h6>"))
        self.assertEqual([names(b) for b in blocks], [['h2'], ['h2'], ['h6']])

    def test_partition_is_exhaustive_and_ordered(self):
        nodes = nodes_of("<p>0</p><h1>1</h1><ul><li>2</li></ul><h4>3</h4><pre>4</pre><hr/><table></table>")
        blocks = segment(nodes)
        flattened = [n for b in blocks for n in b.nodes]
        self.assertEqual(len(flattened), len(nodes))
        self.assertTrue(all(a is b for a, b in zip(flattened, nodes)))

    def test_stable(self):
        nodes = nodes_of("<p>x</p><h2>A</h2><p>y</p>")
        first = segment(nodes)
        second = segment(nodes)
        self.assertEqual([(b.level, names(b)) for b in first], [(b.level, names(b)) for b in second])

    def test_heading_level(self):
        soup = BeautifulSoup("<h5>x</h5><p>y</p><header>z</header>", 'html.parser')
        self.assertEqual([heading_level(t) for t in soup.find_all(True)], [5, 0, 0])
        self.assertEqual(heading_level("h1"), 0)

class TestTopLevelNodes(unittest.TestCase):
    def test_skips_whitespace_and_comments(self):
        nodes = nodes_of("<h1>A</h1>\n\n<!-- note -->\n<p>B</p>\nstray text\n")
        self.assertEqual(len(nodes), 3)
        self.assertEqual(nodes[2].strip(), "stray text")

class TestWrapContentBlocks(unittest.TestCase):
    def test_wraps_blocks_in_divs(self):
        soup = BeautifulSoup("<p>intro</p>\n<h2>Title</h2>\n<p>body</p>\n", 'html.parser')
        blocks = wrap_content_blocks(soup)
        wrappers = soup.find_all('div', recursive=False)
        self.assertEqual(len(blocks), 2)
        self.assertEqual(len(wrappers), 2)
        self.assertEqual(wrappers[0]['class'], ['doc-block', 'doc-block-1'])
        self.assertEqual(wrappers[1]['class'], ['doc-block', 'doc-block-2'])
        self.assertEqual([c.name for c in wrappers[1].find_all(True, recursive=False)], ['h2', 'p'])

    def test_empty_tree_untouched(self):
        soup = BeautifulSoup("", 'html.parser')
        self.assertEqual(wrap_content_blocks(soup), [])
        self.assertEqual(str(soup), "")

if __name__ == '__main__':
    unittest.main()
