"""
coders.py

Codeword derivation, the Huffman encoder and decoder, and the bit packing
helpers used to store encoded bits in bytes.
"""


from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple, Union

import numpy as np

from .errors import DecodeError, EmptyInputError, UnknownSymbolError
from .logger import Logger, CodingLog, CodingProgressStep
from .models import FrequencyTable
from .tree import Branch, Leaf, Node, build_tree
from .validators import validate_non_negative

Codeword = Tuple[bool, ...]


def derive_codewords(tree: Node) -> Dict[Any, Codeword]:
    """
    Walk the tree once and collect the codeword of every leaf.

    The first child of a branch appends a 0 bit (False), the second a 1 bit
    (True). A tree made of a single leaf gives that symbol an empty codeword.

    Args:
        tree (Node): The Huffman tree.

    Returns:
        Dict[Any, Codeword]: One codeword per symbol.
    """
    if not isinstance(tree, (Leaf, Branch)):
        raise ValueError("Tree must be a Leaf or a Branch")
    codewords: Dict[Any, Codeword] = {}
    stack: List[Tuple[Node, Codeword]] = [(tree, ())]
    while stack:
        node, prefix = stack.pop()
        if isinstance(node, Leaf):
            codewords[node.symbol] = prefix
        else:
            stack.append((node.second, prefix + (True,)))
            stack.append((node.first, prefix + (False,)))
    return codewords


def pack_bits_to_bytes(bits: Sequence[Union[bool, int]]) -> bytes:
    """
    Pack bits into bytes, most significant bit first.

    The unused low bits of the final byte are zero.

    Args:
        bits (Sequence[Union[bool, int]]): The bits to pack.

    Returns:
        bytes: Packed bytes.
    """
    if bits is None:
        raise ValueError("Bits cannot be None")
    return np.packbits(np.asarray(bits, dtype=np.uint8)).tobytes()


def unpack_bytes_to_bits(data: bytes, bit_count: Optional[int] = None) -> List[bool]:
    """
    Unpack bytes into bits (MSB first) and drop the padding.

    Args:
        data (bytes): The byte stream.
        bit_count (Optional[int]): Number of meaningful bits; all bits when None.

    Returns:
        List[bool]: The first bit_count bits.

    Raises:
        DecodeError: If bit_count exceeds the bits available in data.
    """
    if data is None:
        raise ValueError("Data cannot be None")
    available = len(data) * 8
    if bit_count is None:
        bit_count = available
    validate_non_negative(bit_count, "Bit count")
    if bit_count > available:
        raise DecodeError(f"Bit count {bit_count} exceeds the {available} bits available")
    bits = np.unpackbits(np.frombuffer(data, dtype=np.uint8), count=bit_count)
    return bits.astype(bool).tolist()


class HuffmanEncoder:
    """
    Maps symbols to their codewords.

    A single encoder can encode any number of streams over the alphabet it
    was built for.
    """

    def __init__(self, codewords: Dict[Any, Codeword]) -> None:
        if not isinstance(codewords, dict):
            raise ValueError("Codewords must be of type dict")
        self.codewords: Dict[Any, Codeword] = codewords

    @staticmethod
    def from_tree(tree: Node) -> 'HuffmanEncoder':
        return HuffmanEncoder(derive_codewords(tree))

    @staticmethod
    def from_symbols(symbols: Iterable[Any], logger: Optional[Logger] = None) -> 'HuffmanEncoder':
        """
        Build an encoder tailored to the symbols produced by the iterable.

        The same content is expected to be passed to ``encode`` afterwards.

        Raises:
            EmptyInputError: If the iterable produced no symbols.
        """
        table = FrequencyTable()
        table.add_from_iterable(symbols)
        tree = build_tree(table, logger)
        if tree is None:
            raise EmptyInputError()
        return HuffmanEncoder.from_tree(tree)

    def encode(self, symbols: Iterable[Any], logger: Optional[Logger] = None) -> List[bool]:
        """
        Encode a stream of symbols into bits.

        Args:
            symbols (Iterable[Any]): The symbols to encode.
            logger (Optional[Logger]): Logger instance for logging.

        Returns:
            List[bool]: The concatenated codewords.

        Raises:
            UnknownSymbolError: On the first symbol without a codeword. No
                partial output is returned.
        """
        track_progress = logger is not None and logger.wants_progress()
        total = len(symbols) if hasattr(symbols, "__len__") else None
        bits: List[bool] = []
        count = 0
        for symbol in symbols:
            codeword = self.codewords.get(symbol)
            if codeword is None:
                raise UnknownSymbolError(symbol)
            bits.extend(codeword)
            count += 1
            if track_progress:
                logger.log(CodingProgressStep("Encoding symbols", total))
        if logger is not None:
            logger.log(CodingLog(count, len(bits)))
        return bits


class HuffmanDecoder:
    """
    Decodes bits by walking the tree from the root.

    The tree is only read, so it may be shared with the caller and the decoder
    may be reused for any number of bit sequences.
    """

    def __init__(self, tree: Node) -> None:
        if not isinstance(tree, (Leaf, Branch)):
            raise ValueError("Tree must be a Leaf or a Branch")
        self._tree: Node = tree

    @property
    def tree(self) -> Node:
        return self._tree

    def decode(
        self,
        bits: Sequence[Union[bool, int]],
        bit_count: Optional[int] = None,
        symbol_count: Optional[int] = None,
        logger: Optional[Logger] = None,
    ) -> List[Any]:
        """
        Decode exactly bit_count bits into symbols.

        Args:
            bits (Sequence[Union[bool, int]]): The encoded bits.
            bit_count (Optional[int]): Number of bits to consume; len(bits) when None.
            symbol_count (Optional[int]): Expected number of symbols. Required
                for a single-leaf tree, whose codeword is empty.
            logger (Optional[Logger]): Logger instance for logging.

        Returns:
            List[Any]: The decoded symbols.

        Raises:
            DecodeError: If the bits end inside a codeword, bit_count exceeds
                the bits given, or symbol_count does not match.
        """
        if isinstance(bits, np.ndarray):
            bits = bits.tolist()
        if bit_count is None:
            bit_count = len(bits)
        validate_non_negative(bit_count, "Bit count")
        if symbol_count is not None:
            validate_non_negative(symbol_count, "Symbol count")
        if bit_count > len(bits):
            raise DecodeError(f"Bit count {bit_count} exceeds the {len(bits)} bits given")

        root = self._tree
        if isinstance(root, Leaf):
            if symbol_count is None:
                raise DecodeError("A single-symbol tree needs the symbol count to decode")
            if bit_count != 0:
                raise DecodeError("A single-symbol tree encodes to zero bits")
            try:
                repeated = [root.symbol] * symbol_count
            except (OverflowError, MemoryError) as e:
                raise DecodeError(f"Cannot decode {symbol_count} symbols") from e
            if logger is not None:
                logger.log(CodingLog(symbol_count, 0))
            return repeated

        track_progress = logger is not None and logger.wants_progress()
        symbols: List[Any] = []
        node = root
        pos = 0
        while pos < bit_count:
            node = node.second if bits[pos] else node.first
            pos += 1
            if isinstance(node, Leaf):
                symbols.append(node.symbol)
                node = root
                if track_progress:
                    logger.log(CodingProgressStep("Decoding symbols", symbol_count))
        if node is not root:
            raise DecodeError("Bit sequence ends in the middle of a codeword")
        if symbol_count is not None and symbol_count != len(symbols):
            raise DecodeError(f"Expected {symbol_count} symbols, decoded {len(symbols)}")
        if logger is not None:
            logger.log(CodingLog(len(symbols), bit_count))
        return symbols


def build_encoder_decoder_pair(
    frequencies: Union[FrequencyTable, Dict[Any, int]],
    logger: Optional[Logger] = None,
) -> Optional[Tuple[HuffmanEncoder, HuffmanDecoder]]:
    """
    Build a tree and return an encoder and a decoder that share it.

    Returns:
        Optional[Tuple[HuffmanEncoder, HuffmanDecoder]]: None for an empty table.
    """
    tree = build_tree(frequencies, logger)
    if tree is None:
        return None
    return HuffmanEncoder.from_tree(tree), HuffmanDecoder(tree)
