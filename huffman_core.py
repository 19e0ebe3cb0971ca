# filename: huffman_core.py

import heapq
import logging
from collections import Counter
from itertools import count

logger = logging.getLogger(__name__)

STRATEGY_RESORT = "resort"
STRATEGY_HEAP = "heap"
STRATEGIES = (STRATEGY_RESORT, STRATEGY_HEAP)


class HuffmanError(ValueError):
    """Base class for codec failures (never raised for I/O problems)."""


class ConstructionError(HuffmanError):
    pass


class UnknownSymbolError(HuffmanError):
    def __init__(self, symbol, position):
        super().__init__(
            f"character {symbol!r} at position {position} has no associated Huffman code"
        )
        self.symbol = symbol
        self.position = position


class TruncatedStreamError(HuffmanError):
    def __init__(self, bits_read, decoded):
        super().__init__(
            f"bit stream ends inside a code after {bits_read} bits "
            f"({decoded} characters decoded)"
        )
        self.bits_read = bits_read
        self.decoded = decoded


class CorruptStreamError(HuffmanError):
    def __init__(self, symbol, position):
        super().__init__(f"invalid bit {symbol!r} at position {position}")
        self.symbol = symbol
        self.position = position


class HuffmanNode:
    def __init__(self, char, freq, left=None, right=None):
        self.char = char
        self.freq = freq
        self.left = left
        self.right = right

    @property
    def is_leaf(self):
        return self.left is None and self.right is None

    def __repr__(self):
        if self.is_leaf:
            return f"HuffmanNode({self.char!r}, {self.freq})"
        return f"HuffmanNode(<internal>, {self.freq})"


class HuffmanLogic:
    def __init__(self, strategy=STRATEGY_RESORT):
        if strategy not in STRATEGIES:
            raise ValueError(f"unknown tree strategy: {strategy!r}")
        self.strategy = strategy

    def count_frequencies(self, *chunks):
        # Counter keeps first-occurrence order, which seeds the tie-break order
        freqs = Counter()
        for chunk in chunks:
            freqs.update(chunk)
        return freqs

    def sorted_frequencies(self, freqs):
        """Characters by descending count; equal counts keep table order."""
        return sorted(freqs.items(), key=lambda item: item[1], reverse=True)

    def build_tree(self, freqs):
        if not freqs:
            raise ConstructionError("cannot build a code tree from an empty frequency table")
        for char, freq in freqs.items():
            if freq <= 0:
                raise ConstructionError(f"character {char!r} has non-positive frequency {freq}")

        leaves = [HuffmanNode(char, freq) for char, freq in freqs.items()]
        if self.strategy == STRATEGY_HEAP:
            root = self._merge_with_heap(leaves)
        else:
            root = self._merge_with_resort(leaves)
        logger.debug("built code tree: %d leaves, weight %d", len(leaves), root.freq)
        return root

    def _merge_with_resort(self, nodes):
        # list.sort is stable: equal weights stay in collection order,
        # and new parents go to the end before every full re-sort
        nodes = sorted(nodes, key=lambda node: node.freq)
        while len(nodes) > 1:
            left, right = nodes[0], nodes[1]
            merged = HuffmanNode(None, left.freq + right.freq, left, right)
            nodes = nodes[2:] + [merged]
            nodes.sort(key=lambda node: node.freq)
        return nodes[0]

    def _merge_with_heap(self, nodes):
        # Tree shape can differ from the re-sort strategy when weights tie
        order = count()
        priority_queue = [(node.freq, next(order), node) for node in nodes]
        heapq.heapify(priority_queue)

        while len(priority_queue) > 1:
            _, _, left = heapq.heappop(priority_queue)
            _, _, right = heapq.heappop(priority_queue)
            merged = HuffmanNode(None, left.freq + right.freq, left, right)
            heapq.heappush(priority_queue, (merged.freq, next(order), merged))

        return priority_queue[0][2]

    def walk_leaves(self, root):
        """Yield ``(char, code)`` for every leaf, left to right.

        A root that is itself a leaf yields the empty code.
        """
        stack = [(root, "")]
        while stack:
            node, code = stack.pop()
            if node.is_leaf:
                yield node.char, code
                continue
            # right first so the left subtree comes out first
            stack.append((node.right, code + "1"))
            stack.append((node.left, code + "0"))

    def generate_codes(self, root):
        codes = {}
        for char, code in self.walk_leaves(root):
            # a lone leaf needs one bit to be decodable
            codes[char] = code or "0"
        return codes

    def tree_stats(self, root):
        leaves = internal = depth = 0
        stack = [(root, 0)]
        while stack:
            node, level = stack.pop()
            depth = max(depth, level)
            if node.is_leaf:
                leaves += 1
            else:
                internal += 1
                stack.append((node.left, level + 1))
                stack.append((node.right, level + 1))
        return {"leaves": leaves, "internal": internal, "weight": root.freq, "depth": depth}

    def encode(self, data, codes):
        encoded = []
        for position, char in enumerate(data):
            code = codes.get(char)
            if code is None:
                raise UnknownSymbolError(char, position)
            encoded.append(code)
        return "".join(encoded)

    def decode(self, bits, root):
        """Walk ``root`` bit by bit and return the decoded text.

        A stream that stops inside a code raises ``TruncatedStreamError``.
        The format has no symbol count, so a stream cut right after a 1-bit
        code decodes silently to a shorter text; with a single-character
        tree every cut is of that kind.
        """
        if root.is_leaf:
            return self._decode_single(bits, root)

        decoded = []
        node = root
        for position, bit in enumerate(bits):
            if bit == "0":
                node = node.left
            elif bit == "1":
                node = node.right
            else:
                raise CorruptStreamError(bit, position)

            if node.is_leaf:
                decoded.append(node.char)
                node = root

        if node is not root:
            raise TruncatedStreamError(len(bits), len(decoded))
        return "".join(decoded)

    def _decode_single(self, bits, root):
        for position, bit in enumerate(bits):
            if bit != "0":
                raise CorruptStreamError(bit, position)
        return root.char * len(bits)
