import math
import warnings

from huffman_errors import EmptyAlphabetError, SymbolNotInAlphabet
from minheap import MinHeap

READ_CHUNK = 64 * 1024 # bytes pulled from a stream per read

# accepted spellings of a bit: characters when decoding str, byte values when decoding bytes
ZERO_BITS = ("0", ord("0"))
ONE_BITS = ("1", ord("1"))


class HuffmanNode: # Node for Huffman tree
    __slots__ = ("symbol", "weight", "left", "right")

    def __init__(self, symbol, weight, left=None, right=None):
        self.symbol = symbol    # None for internal nodes
        self.weight = weight
        self.left = left
        self.right = right

    def is_leaf(self) -> bool:
        return self.left is None and self.right is None

    def __repr__(self):
        if self.is_leaf():
            return f"HuffmanNode(symbol={self.symbol!r}, weight={self.weight!r})"
        return f"HuffmanNode(weight={self.weight!r})"


def _check_weight(symbol, weight):
    if not math.isfinite(weight) or weight < 0:
        raise ValueError(f"weight for symbol {symbol!r} must be a non-negative finite number, got {weight!r}")


def build_huffman_tree(frequency_table) -> HuffmanNode: # frequency_table: dict of symbol -> weight
    """
    Greedy merge of the two lightest nodes until one root remains.
    Ties go to the earlier entry of frequency_table, and merged nodes rank
    after all leaves in the order they were created, so the same table
    always gives the same tree.
    """
    leaves = []
    for symbol, weight in frequency_table.items():
        _check_weight(symbol, weight)
        leaves.append(HuffmanNode(symbol, weight))
    if not leaves:
        raise EmptyAlphabetError("cannot build a Huffman tree from an empty alphabet")

    priority_queue = MinHeap.build_from_unordered(leaves)

    # Build the tree
    while not priority_queue.size_is_one():
        left = priority_queue.extract_min()
        right = priority_queue.extract_min()
        merged_node = HuffmanNode(None, left.weight + right.weight, left, right) # internal node with combined weight
        priority_queue.insert(merged_node)

    return priority_queue.extract_min() # root of the tree


def build_huffman_tree_from_arrays(symbols, weights) -> HuffmanNode: # symbols[i] is weighted by weights[i]
    symbols = list(symbols)
    weights = list(weights)
    if len(symbols) != len(weights):
        raise ValueError(f"got {len(symbols)} symbols but {len(weights)} weights")
    if len(set(symbols)) != len(symbols):
        raise ValueError("symbols must be distinct")
    return build_huffman_tree(dict(zip(symbols, weights)))


def iter_leaf_paths(root):
    """
    Depth-first walk with an explicit stack, left subtree first.
    Yields (leaf, code) for every leaf exactly once; the code is the
    root-to-leaf path with left='0' and right='1'.
    """
    path = [] # one buffer for the whole walk, cut back to the popped node's depth
    stack = [(root, 0, "")]
    while stack:
        node, depth, bit = stack.pop()
        del path[max(depth - 1, 0):]
        if depth:
            path.append(bit)

        if node.is_leaf():
            yield node, "".join(path)
            continue

        stack.append((node.right, depth + 1, "1"))
        stack.append((node.left, depth + 1, "0"))


def generate_huffman_codes(root): # root: root of the Huffman tree
    codes = {}
    for leaf, code in iter_leaf_paths(root):
        codes[leaf.symbol] = code
    return codes # return the mapping of symbols to their corresponding Huffman codes


def lookup_code(root, target): # code for a single symbol, None when the tree has no such leaf
    for leaf, code in iter_leaf_paths(root):
        if leaf.symbol == target:
            return code
    return None


def codec_code_map(root):
    # A lone leaf has an empty path which cannot be walked back.
    # Force it to "0" so that the encoding/decoding works
    codes = generate_huffman_codes(root)
    if root.is_leaf():
        codes[root.symbol] = "0"
    return codes


def weighted_path_length(root) -> float: # sum of weight * depth over all leaves
    return sum(leaf.weight * len(code) for leaf, code in iter_leaf_paths(root))


def average_code_length(root) -> float: # expected bits per symbol under the tree's own weights
    if root.weight == 0:
        return 0.0
    return weighted_path_length(root) / root.weight


def huffman_encode(data, code_map: dict, strict: bool = True) -> str: # data: iterable of symbols, code_map: dict of symbol -> Huffman code
    parts = []
    for symbol in data:
        code = code_map.get(symbol)
        if code is None:
            if strict:
                raise SymbolNotInAlphabet(symbol)
            warnings.warn(f"dropping symbol {symbol!r}: not in the alphabet", stacklevel=2)
            continue
        parts.append(code)
    return "".join(parts)


def iter_decode(bits, root):
    """
    Walk from the root one bit at a time and emit a symbol on every leaf.
    A move towards a missing child is ignored, as is anything that is not
    a bit; an unfinished path at the end of the input is dropped.
    """
    if root.is_leaf(): # degenerate tree: the lone symbol is coded as "0"
        for bit in bits:
            if bit in ZERO_BITS:
                yield root.symbol
        return

    current_node = root
    for bit in bits:
        if bit in ZERO_BITS:
            if current_node.left is not None:
                current_node = current_node.left
        elif bit in ONE_BITS:
            if current_node.right is not None:
                current_node = current_node.right
        else:
            continue

        if current_node.is_leaf(): # reached a leaf
            yield current_node.symbol
            current_node = root # reset to the root for the next symbol


def huffman_decode(bitstring, root) -> bytes: # bitstring: str or bytes of '0'/'1', root: root of the Huffman tree
    return bytes(iter_decode(bitstring, root))


def _iter_stream(reader):
    while True:
        chunk = reader.read(READ_CHUNK)
        if not chunk:
            return
        yield from chunk


def encode_stream(root, reader, writer, strict: bool = True) -> int:
    """
    Encode a binary reader into '0'/'1' ASCII text on a binary writer.
    Returns the number of bits written.
    """
    code_map = codec_code_map(root)
    total_bits = 0
    while True:
        chunk = reader.read(READ_CHUNK)
        if not chunk:
            break
        encoded = huffman_encode(chunk, code_map, strict=strict)
        writer.write(encoded.encode("ascii"))
        total_bits += len(encoded)
    return total_bits


def decode_stream(root, reader, writer) -> int:
    """
    Decode '0'/'1' ASCII text from a binary reader onto a binary writer.
    Returns the number of symbols written.
    """
    out = bytearray()
    written = 0
    for symbol in iter_decode(_iter_stream(reader), root):
        out.append(symbol)
        if len(out) >= READ_CHUNK:
            writer.write(bytes(out))
            written += len(out)
            out.clear()
    if out:
        writer.write(bytes(out))
        written += len(out)
    return written
