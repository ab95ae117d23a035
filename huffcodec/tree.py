"""
tree.py

Huffman tree nodes and the deterministic tree builder.
"""


import heapq
from dataclasses import dataclass
from typing import Any, Dict, Iterator, Optional, Union

from .models import FrequencyTable
from .logger import Logger, TreeConstructionLog


@dataclass(frozen=True)
class Leaf:
    """A tree node holding exactly one symbol."""
    symbol: Any


@dataclass(frozen=True)
class Branch:
    """
    A tree node with two ordered children.

    ``first`` is reached with a 0 bit, ``second`` with a 1 bit.
    """
    first: 'Node'
    second: 'Node'


Node = Union[Leaf, Branch]


class WeightedNode:
    """
    A node together with its construction-time weight.

    Nodes are ordered by weight first. At equal weight a branch sorts before a
    leaf, two leaves sort by symbol, and two branches sort by their first
    children under the same rules. Following first children always ends at a
    leaf, so that order reduces to comparing the length of the first-child
    chain (longer first) and then the symbol of the leaf it ends at.
    """
    def __init__(self, node: Node, weight: int, chain_depth: int, chain_symbol: Any) -> None:
        self.node = node
        self.weight = weight
        self.chain_depth = chain_depth
        self.chain_symbol = chain_symbol

    @staticmethod
    def leaf(symbol: Any, weight: int) -> 'WeightedNode':
        return WeightedNode(Leaf(symbol), weight, 0, symbol)

    @staticmethod
    def merge(greater: 'WeightedNode', lower: 'WeightedNode') -> 'WeightedNode':
        """Combine two nodes; the greater one becomes the first child."""
        return WeightedNode(
            Branch(greater.node, lower.node),
            greater.weight + lower.weight,
            greater.chain_depth + 1,
            greater.chain_symbol,
        )

    def sort_key(self):
        return (self.weight, -self.chain_depth, self.chain_symbol)

    def __lt__(self, other: 'WeightedNode') -> bool:
        return self.sort_key() < other.sort_key()


def build_tree(frequencies: Union[FrequencyTable, Dict[Any, int]],
               logger: Optional[Logger] = None) -> Optional[Node]:
    """
    Build a Huffman tree by repeatedly merging the two smallest nodes.

    Args:
        frequencies (Union[FrequencyTable, Dict[Any, int]]): Symbol counts. A
            FrequencyTable is finalized by this call.
        logger (Optional[Logger]): Logger instance for logging.

    Returns:
        Optional[Node]: None for an empty table, a single Leaf for a single
        symbol, otherwise the root Branch.
    """
    if isinstance(frequencies, FrequencyTable):
        counts = frequencies.finalize()
    elif isinstance(frequencies, dict):
        counts = frequencies
    else:
        raise ValueError("Frequencies must be a FrequencyTable or a dict")

    if not counts:
        return None

    heap = [WeightedNode.leaf(symbol, count) for symbol, count in counts.items()]
    heapq.heapify(heap)
    while len(heap) > 1:
        lower = heapq.heappop(heap)
        greater = heapq.heappop(heap)
        heapq.heappush(heap, WeightedNode.merge(greater, lower))

    root = heap[0]
    if logger is not None:
        logger.log(TreeConstructionLog(len(counts), root.weight, tree_depth(root.node)))
    return root.node


def iter_leaves(tree: Node) -> Iterator[Any]:
    """Yield the leaf symbols of tree in pre-order."""
    stack = [tree]
    while stack:
        node = stack.pop()
        if isinstance(node, Leaf):
            yield node.symbol
        else:
            stack.append(node.second)
            stack.append(node.first)


def tree_depth(tree: Node) -> int:
    """Return the length of the longest root-to-leaf path."""
    depth = 0
    stack = [(tree, 0)]
    while stack:
        node, level = stack.pop()
        if isinstance(node, Leaf):
            depth = max(depth, level)
        else:
            stack.append((node.first, level + 1))
            stack.append((node.second, level + 1))
    return depth
