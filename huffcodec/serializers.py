"""
serializers.py

Binary encoding of leaf symbols and of whole Huffman trees.
"""


import abc
import struct
from typing import Any, List, Optional, Tuple

from .errors import MalformedContainerError
from .settings import TREE_TAG_BRANCH, TREE_TAG_LEAF
from .tree import Branch, Leaf, Node


class BaseSymbolSerializer(abc.ABC):
    @property
    @abc.abstractmethod
    def code(self) -> int:
        """Return the unique identification code for the serializer."""
        pass

    @abc.abstractmethod
    def write_symbol(self, symbol: Any) -> bytes:
        """
        Convert one symbol into bytes.

        Args:
            symbol (Any): The symbol.

        Returns:
            bytes: The binary representation of the symbol.
        """
        pass

    @abc.abstractmethod
    def read_symbol(self, data: bytes, offset: int) -> Tuple[Any, int]:
        """
        Read one symbol starting at offset.

        Args:
            data (bytes): The buffer.
            offset (int): Position of the symbol in the buffer.

        Returns:
            Tuple[Any, int]: The symbol and the offset just past it.
        """
        pass

    def symbols_from_bytes(self, data: bytes) -> List[Any]:
        """Split raw input into the symbols this serializer writes."""
        raise ValueError(f"{type(self).__name__} does not read raw input")

    def symbols_to_bytes(self, symbols: List[Any]) -> bytes:
        """Join symbols back into raw output."""
        raise ValueError(f"{type(self).__name__} does not write raw output")


class ByteSymbolSerializer(BaseSymbolSerializer):
    """
    Byte Serializer: symbols are ints in 0-255, written as one byte each.
    """
    @property
    def code(self) -> int:
        return 1

    def write_symbol(self, symbol: Any) -> bytes:
        if isinstance(symbol, bool) or not isinstance(symbol, int) or not 0 <= symbol <= 255:
            raise ValueError("Byte symbols must be ints between 0 and 255")
        return bytes((symbol,))

    def read_symbol(self, data: bytes, offset: int) -> Tuple[Any, int]:
        if offset >= len(data):
            raise MalformedContainerError("Tree data is truncated: missing byte symbol")
        return data[offset], offset + 1

    def symbols_from_bytes(self, data: bytes) -> List[Any]:
        return list(data)

    def symbols_to_bytes(self, symbols: List[Any]) -> bytes:
        return bytes(symbols)


class StringSymbolSerializer(BaseSymbolSerializer):
    """
    String Serializer: symbols are str, written as a length-prefixed UTF-8 string.
    """
    @property
    def code(self) -> int:
        return 2

    def write_symbol(self, symbol: Any) -> bytes:
        if not isinstance(symbol, str):
            raise ValueError("String symbols must be of type str")
        encoded = symbol.encode("utf-8")
        return struct.pack("<I", len(encoded)) + encoded

    def read_symbol(self, data: bytes, offset: int) -> Tuple[Any, int]:
        if offset + 4 > len(data):
            raise MalformedContainerError("Tree data is truncated: missing string length")
        length, = struct.unpack("<I", data[offset : offset + 4])
        offset += 4
        if offset + length > len(data):
            raise MalformedContainerError("Tree data is truncated: missing string symbol")
        try:
            symbol = data[offset : offset + length].decode("utf-8")
        except UnicodeDecodeError as e:
            raise MalformedContainerError(f"String symbol is not valid UTF-8: {e}") from e
        return symbol, offset + length

    def symbols_from_bytes(self, data: bytes) -> List[Any]:
        try:
            return list(data.decode("utf-8"))
        except UnicodeDecodeError as e:
            raise ValueError("Data should be valid UTF-8") from e

    def symbols_to_bytes(self, symbols: List[Any]) -> bytes:
        return "".join(symbols).encode("utf-8")


class IntSymbolSerializer(BaseSymbolSerializer):
    """
    Int Serializer: symbols are signed 64-bit ints.
    """
    @property
    def code(self) -> int:
        return 3

    def write_symbol(self, symbol: Any) -> bytes:
        if isinstance(symbol, bool) or not isinstance(symbol, int):
            raise ValueError("Int symbols must be of type int")
        try:
            return struct.pack("<q", symbol)
        except struct.error as e:
            raise ValueError("Int symbols must fit in a signed 64-bit integer") from e

    def read_symbol(self, data: bytes, offset: int) -> Tuple[Any, int]:
        if offset + 8 > len(data):
            raise MalformedContainerError("Tree data is truncated: missing int symbol")
        symbol, = struct.unpack("<q", data[offset : offset + 8])
        return symbol, offset + 8


def get_serializer(code: int) -> BaseSymbolSerializer:
    """
    Retrieve a symbol serializer instance based on the given code.

    Args:
        code (int): The serializer code.

    Returns:
        BaseSymbolSerializer: An instance of a serializer.

    Raises:
        ValueError: If the serializer code is not supported.
    """
    if code == 1:
        return ByteSymbolSerializer()
    elif code == 2:
        return StringSymbolSerializer()
    elif code == 3:
        return IntSymbolSerializer()
    else:
        raise ValueError("Serializer code not supported")


def serialize_tree(tree: Node, serializer: BaseSymbolSerializer) -> bytes:
    """
    Write the tree in pre-order: a branch tag followed by both children, or a
    leaf tag followed by its symbol.
    """
    out = bytearray()
    stack = [tree]
    while stack:
        node = stack.pop()
        if isinstance(node, Leaf):
            out.append(TREE_TAG_LEAF)
            out += serializer.write_symbol(node.symbol)
        elif isinstance(node, Branch):
            out.append(TREE_TAG_BRANCH)
            stack.append(node.second)
            stack.append(node.first)
        else:
            raise ValueError("Tree nodes must be Leaf or Branch")
    return bytes(out)


def deserialize_tree(data: bytes, serializer: BaseSymbolSerializer) -> Node:
    """
    Rebuild a tree written by serialize_tree.

    Raises:
        MalformedContainerError: On unknown tags, truncated or trailing data,
            or a symbol that appears in more than one leaf.
    """
    # Each pending entry is a branch still waiting for children.
    pending: List[List[Optional[Node]]] = []
    seen = set()
    root: Optional[Node] = None
    offset = 0
    while root is None:
        if offset >= len(data):
            raise MalformedContainerError("Tree data is truncated")
        tag = data[offset]
        offset += 1
        if tag == TREE_TAG_BRANCH:
            pending.append([None, None])
            continue
        if tag != TREE_TAG_LEAF:
            raise MalformedContainerError(f"Unknown tree tag: {tag}")
        symbol, offset = serializer.read_symbol(data, offset)
        if symbol in seen:
            raise MalformedContainerError(f"Symbol appears in more than one leaf: {symbol!r}")
        seen.add(symbol)
        node: Node = Leaf(symbol)
        while True:
            if not pending:
                root = node
                break
            children = pending[-1]
            if children[0] is None:
                children[0] = node
                break
            pending.pop()
            node = Branch(children[0], node)
    if offset != len(data):
        raise MalformedContainerError("Tree data has trailing bytes")
    return root
