import re
import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, List, Optional

from bs4 import BeautifulSoup, NavigableString, Tag
from bs4.element import Comment

logger = logging.getLogger(__name__)

_HEADING_RE = re.compile(r'^h([1-6])$', re.IGNORECASE)

@dataclass
class Block:
    """A heading (None for leading content) and the sibling nodes up to the next heading."""
    heading: Optional[Any] = None
    level: int = 1
    nodes: List[Any] = field(default_factory=list)

def heading_level(node: Any) -> int:
    """1-6 for heading tags, 0 for anything else."""
    name = getattr(node, 'name', None)
    if not isinstance(node, Tag) or not name:
        return 0
    match = _HEADING_RE.match(name)
    return int(match.group(1)) if match else 0

def segment(nodes: Iterable[Any]) -> List[Block]:
    """
    Partition top-level nodes into heading-anchored blocks, in document order.
    Content before the first heading forms a headingless level-1 block.
    """
    blocks: List[Block] = []
    current: Optional[Block] = None
    for node in nodes:
        level = heading_level(node)
        if level > 0:
            if current is not None:
                blocks.append(current)
            current = Block(heading=node, level=level, nodes=[node])
        else:
            if current is None:
                current = Block()
            current.nodes.append(node)
    if current is not None:
        blocks.append(current)
    return blocks

def top_level_nodes(root: Tag) -> List[Any]:
    """Element children of root plus any non-blank stray text."""
    nodes = []
    for child in root.children:
        if isinstance(child, Tag):
            nodes.append(child)
        elif isinstance(child, NavigableString) and not isinstance(child, Comment) and child.strip():
            nodes.append(child)
    return nodes

def wrap_content_blocks(root: Tag) -> List[Block]:
    """
    Replace root's children with one <div class="doc-block doc-block-N"> per block.
    Returns the blocks; their nodes now live inside the wrapper divs.
    """
    blocks = segment(top_level_nodes(root))
    if not blocks:
        return blocks
    factory = root if isinstance(root, BeautifulSoup) else BeautifulSoup('', 'html.parser')
    wrappers = []
    for block in blocks:
        wrapper = factory.new_tag('div')
        wrapper['class'] = ['doc-block', f'doc-block-{block.level}']
        for node in block.nodes:
            wrapper.append(node.extract())
        wrappers.append(wrapper)
    root.clear()
    for wrapper in wrappers:
        root.append(wrapper)
    logger.debug(f"Wrapped content into {len(blocks)} blocks")
    return blocks
