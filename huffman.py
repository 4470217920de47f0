import heapq
import math
from collections import Counter
from dataclasses import dataclass
from typing import Dict, Hashable, Iterable, Iterator, List, Tuple, Union

Symbol = Hashable


class HuffmanError(ValueError):
    pass


class InvalidInput(HuffmanError):
    pass


class SymbolLookupError(HuffmanError, LookupError):
    def __init__(self, symbol):
        super().__init__(f"symbol {symbol!r} has no code word")
        self.symbol = symbol


class CorruptTree(HuffmanError):
    pass


class MalformedStream(HuffmanError):
    def __init__(self, message, position=None):
        super().__init__(message)
        self.position = position # bit index where decoding gave up, if known


@dataclass(frozen=True)
class Leaf: # carries a symbol, never children
    symbol: Symbol
    freq: int


@dataclass(frozen=True)
class Internal: # merge node, freq is the sum of both children
    freq: int
    left: "Node"
    right: "Node"


Node = Union[Leaf, Internal]


def count_frequencies(data: Iterable[Symbol]) -> Dict[Symbol, int]:
    return Counter(data) # keys keep first-occurrence order


def build_tree(frequency_table: Dict[Symbol, int]) -> Node: # frequency_table: dict of symbol -> frequency
    if not frequency_table:
        raise InvalidInput("cannot build a Huffman tree from an empty frequency table")

    # (freq, order, node): order breaks ties so nodes themselves are never compared
    priority_queue = []
    for order, (symbol, frequency) in enumerate(frequency_table.items()):
        if frequency < 1:
            raise InvalidInput(f"symbol {symbol!r} has non-positive frequency {frequency}")
        priority_queue.append((frequency, order, Leaf(symbol, frequency)))
    heapq.heapify(priority_queue)
    order = len(priority_queue)

    while len(priority_queue) > 1:
        _, _, left = heapq.heappop(priority_queue)
        _, _, right = heapq.heappop(priority_queue)
        merged = Internal(left.freq + right.freq, left, right)
        heapq.heappush(priority_queue, (merged.freq, order, merged))
        order += 1

    return priority_queue[0][2] # root of the tree


def derive_codes(root: Node) -> Dict[Symbol, str]:
    """
    Map every leaf symbol to its root-to-leaf path ('0' = left, '1' = right).

    A lone leaf at the root gets the code word "0" so that every occurrence
    still costs one bit in the stream.
    """
    if isinstance(root, Leaf):
        return {root.symbol: "0"}

    codes = {}
    stack = [(root, "")] # (node, path so far)
    while stack:
        node, prefix = stack.pop()
        if isinstance(node, Leaf):
            codes[node.symbol] = prefix
            continue
        stack.append((node.right, prefix + "1"))
        stack.append((node.left, prefix + "0"))
    return codes


def encode(data: Iterable[Symbol], codes: Dict[Symbol, str]) -> str:
    out = []
    for symbol in data:
        try:
            out.append(codes[symbol])
        except (KeyError, TypeError): # TypeError: unhashable symbol
            raise SymbolLookupError(symbol) from None
    return "".join(out)


def decode(bitstring: str, root: Node) -> List[Symbol]:
    """
    Walk the tree bit by bit, emitting a symbol at every leaf.

    Raises MalformedStream when the stream holds something other than bits
    or stops in the middle of a code word, and CorruptTree when the cursor
    reaches a node it cannot descend from.
    """
    if isinstance(root, Leaf):
        return _decode_single(bitstring, root)
    if not isinstance(root, Internal):
        raise CorruptTree(f"root {root!r} is not a tree node")

    decoded = []
    node = root
    for position, bit in enumerate(bitstring):
        if bit == "0":
            node = node.left
        elif bit == "1":
            node = node.right
        else:
            raise MalformedStream(f"invalid bit {bit!r}", position)
        if not isinstance(node, (Leaf, Internal)):
            raise CorruptTree(f"bad child {node!r} for bit {bit!r} at position {position}")

        if isinstance(node, Leaf):
            decoded.append(node.symbol)
            node = root # reset for the next code word

    if node is not root:
        raise MalformedStream("stream ends in the middle of a code word", len(bitstring))
    return decoded


def _decode_single(bitstring, leaf):
    for position, bit in enumerate(bitstring):
        if bit != "0":
            raise MalformedStream(f"invalid bit {bit!r} for a single-symbol code", position)
    return [leaf.symbol] * len(bitstring)


def compress_text(message: str) -> Tuple[str, Dict[str, str], Node]:
    root = build_tree(count_frequencies(message))
    codes = derive_codes(root)
    return encode(message, codes), codes, root


def decompress_text(bitstring: str, root: Node) -> str:
    return "".join(decode(bitstring, root))


def iter_nodes(root: Node) -> Iterator[Node]: # pre-order
    stack = [root]
    while stack:
        node = stack.pop()
        yield node
        if isinstance(node, Internal):
            stack.append(node.right)
            stack.append(node.left)


def average_code_length(codes: Dict[Symbol, str], frequency_table: Dict[Symbol, int]) -> float:
    total = sum(frequency_table.values())
    if total == 0:
        return 0.0
    return sum(len(codes[s]) * f for s, f in frequency_table.items()) / total


def entropy(frequency_table: Dict[Symbol, int]) -> float:
    total = sum(frequency_table.values())
    h = 0.0
    for f in frequency_table.values():
        p = f / total
        h -= p * math.log2(p)
    return h
