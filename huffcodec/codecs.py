import struct
import sys
from typing import Any, List, Optional, Sequence

from .validators import validate_type, validate_non_negative, validate_file_exists
from .errors import EmptyInputError, MalformedContainerError
from .models import FrequencyTable
from .tree import Branch, Leaf, Node, iter_leaves
from .coders import (
    HuffmanDecoder,
    build_encoder_decoder_pair,
    pack_bits_to_bytes,
    unpack_bytes_to_bits,
)
from .serializers import (
    BaseSymbolSerializer,
    ByteSymbolSerializer,
    get_serializer,
    serialize_tree,
    deserialize_tree,
)
from .settings import VERSION, FILE_SIGNATURE
from .logger import Logger, ContainerLog

HEADER_FORMAT = "<IQQ"
HEADER_SIZE = struct.calcsize(HEADER_FORMAT)


class CompressedContainer:
    """Represents a compressed artifact: the tree, the packed bits and their exact count."""

    def __init__(
        self,
        tree: Node,
        payload: bytes,
        bit_count: int,
        symbol_count: int,
        serializer_code: int = 1,
    ) -> None:
        if not isinstance(tree, (Leaf, Branch)):
            raise ValueError("Tree must be a Leaf or a Branch")
        validate_type(payload, "Payload", bytes)
        validate_non_negative(bit_count, "Bit count")
        validate_non_negative(symbol_count, "Symbol count")
        validate_type(serializer_code, "Serializer code", int)

        try:
            get_serializer(serializer_code)
        except ValueError as e:
            raise MalformedContainerError(str(e)) from e
        if bit_count > len(payload) * 8:
            raise MalformedContainerError("Bit count exceeds the bits available in the payload")
        if len(payload) != (bit_count + 7) // 8:
            raise MalformedContainerError("Payload is longer than the bit count requires")
        if isinstance(tree, Leaf) and bit_count != 0:
            raise MalformedContainerError("A single-symbol tree encodes to zero bits")
        # Every codeword of a two-or-more leaf tree is at least one bit long.
        if isinstance(tree, Branch) and symbol_count > bit_count:
            raise MalformedContainerError("Symbol count exceeds the bit count")
        if symbol_count > sys.maxsize:
            raise MalformedContainerError("Symbol count is too large")

        self.tree = tree
        self.payload = payload
        self.bit_count = bit_count
        self.symbol_count = symbol_count
        self.serializer_code = serializer_code

    @staticmethod
    def serialize(container: 'CompressedContainer') -> bytes:
        """
        Serialize a CompressedContainer instance into bytes.

        The format (little endian):
          - serializer_code (4 bytes, unsigned int)
          - bit_count (8 bytes, unsigned int)
          - symbol_count (8 bytes, unsigned int)
          - tree length (4 bytes, unsigned int)
          - tree (variable length, pre-order)
          - payload length (4 bytes, unsigned int)
          - payload (variable length)
        """
        serializer = get_serializer(container.serializer_code)
        tree_bytes = serialize_tree(container.tree, serializer)

        serialized = struct.pack(
            HEADER_FORMAT,
            container.serializer_code,
            container.bit_count,
            container.symbol_count,
        )
        serialized += struct.pack("<I", len(tree_bytes))
        serialized += tree_bytes
        serialized += struct.pack("<I", len(container.payload))
        serialized += container.payload
        return serialized

    @staticmethod
    def deserialize(serialized: bytes) -> 'CompressedContainer':
        """
        Deserialize bytes into a CompressedContainer instance.
        The byte structure is expected to be the same as produced by serialize().

        Raises:
            MalformedContainerError: If the bytes do not describe a valid container.
        """
        validate_type(serialized, "Serialized data", bytes)
        if len(serialized) < HEADER_SIZE:
            raise MalformedContainerError("Serialized data is too short")
        serializer_code, bit_count, symbol_count = struct.unpack(
            HEADER_FORMAT, serialized[:HEADER_SIZE]
        )
        offset = HEADER_SIZE
        try:
            serializer = get_serializer(serializer_code)
        except ValueError as e:
            raise MalformedContainerError(str(e)) from e

        if len(serialized) < offset + 4:
            raise MalformedContainerError("Serialized data is incomplete for tree length")
        tree_length, = struct.unpack("<I", serialized[offset : offset + 4])
        offset += 4
        if len(serialized) < offset + tree_length:
            raise MalformedContainerError("Serialized data is incomplete for tree")
        tree = deserialize_tree(serialized[offset : offset + tree_length], serializer)
        offset += tree_length

        if len(serialized) < offset + 4:
            raise MalformedContainerError("Serialized data is incomplete for payload length")
        payload_length, = struct.unpack("<I", serialized[offset : offset + 4])
        offset += 4
        if len(serialized) < offset + payload_length:
            raise MalformedContainerError("Serialized data is incomplete for payload")
        payload = serialized[offset : offset + payload_length]
        offset += payload_length
        if offset != len(serialized):
            raise MalformedContainerError("Serialized data has trailing bytes")

        return CompressedContainer(tree, payload, bit_count, symbol_count, serializer_code)


class CompressedContainerFile:
    """Provides methods to write and read a CompressedContainer instance to/from a file."""

    @staticmethod
    def write_to_file(container: CompressedContainer, file_path: str, logger: Optional[Logger] = None) -> None:
        """
        Serialize the container and write it, behind the file signature and version, to the given file.

        Args:
            container (CompressedContainer): The container to write.
            file_path (str): The path to the output file.
            logger (Optional[Logger]): Logger instance for logging.
        """
        serialized_data = CompressedContainer.serialize(container)
        with open(file_path, "wb") as file:
            file.write(FILE_SIGNATURE)
            file.write(VERSION.to_bytes(2, "big"))
            file.write(serialized_data)
        if logger is not None:
            logger.log(ContainerLog("Wrote", file_path, len(FILE_SIGNATURE) + 2 + len(serialized_data)))

    @staticmethod
    def read_from_file(file_path: str, logger: Optional[Logger] = None) -> CompressedContainer:
        """
        Read binary data from the given file and deserialize it into a CompressedContainer instance.

        Args:
            file_path (str): The path to the compressed file.
            logger (Optional[Logger]): Logger instance for logging.

        Returns:
            CompressedContainer: The deserialized container.
        """
        with open(file_path, "rb") as file:
            if file.read(len(FILE_SIGNATURE)) != FILE_SIGNATURE:
                raise MalformedContainerError("Invalid file signature")
            file_version = int.from_bytes(file.read(2), "big")
            if file_version != VERSION:
                raise MalformedContainerError("Incompatible version")
            serialized_data = file.read()
        if logger is not None:
            logger.log(ContainerLog("Read", file_path, len(FILE_SIGNATURE) + 2 + len(serialized_data)))
        return CompressedContainer.deserialize(serialized_data)


def pack(tree: Node, bits: Sequence[bool], symbol_count: int, serializer_code: int = 1) -> CompressedContainer:
    """
    Wrap a tree and its encoded bits into a container.

    Args:
        tree (Node): The tree used to encode the bits.
        bits (Sequence[bool]): The encoded bits.
        symbol_count (int): Number of symbols that were encoded.
        serializer_code (int): How leaf symbols are written.

    Returns:
        CompressedContainer: The container.
    """
    return CompressedContainer(tree, pack_bits_to_bytes(bits), len(bits), symbol_count, serializer_code)


def unpack(container: CompressedContainer, logger: Optional[Logger] = None) -> List[Any]:
    """Decode the symbols stored in a container."""
    if not isinstance(container, CompressedContainer):
        raise ValueError("Input must be a CompressedContainer instance")
    bits = unpack_bytes_to_bits(container.payload, container.bit_count)
    decoder = HuffmanDecoder(container.tree)
    return decoder.decode(bits, container.bit_count, container.symbol_count, logger)


class HuffmanCodec:
    def __init__(self, serializer: Optional[BaseSymbolSerializer] = None) -> None:
        if serializer is None:
            serializer = ByteSymbolSerializer()
        if not isinstance(serializer, BaseSymbolSerializer):
            raise ValueError("Serializer must be an instance of BaseSymbolSerializer")
        self.serializer = serializer

    def compress(self, symbols: Sequence[Any], logger: Optional[Logger] = None) -> CompressedContainer:
        """
        Compress a sequence of symbols.

        Args:
            symbols (Sequence[Any]): The symbols to compress. They must be
                writable by the codec's serializer.
            logger (Optional[Logger]): Logger instance for logging.

        Returns:
            CompressedContainer: The resulting container.

        Raises:
            EmptyInputError: If there are no symbols.
            ValueError: If the serializer cannot write one of the symbols.
        """
        symbols = list(symbols)
        table = FrequencyTable()
        table.add_from_iterable(symbols)
        return self._compress_with_table(table, symbols, logger)

    def _compress_with_table(
        self, table: FrequencyTable, symbols: Sequence[Any], logger: Optional[Logger]
    ) -> CompressedContainer:
        pair = build_encoder_decoder_pair(table, logger)
        if pair is None:
            raise EmptyInputError("No compression possible for empty input")
        encoder, decoder = pair
        for symbol in iter_leaves(decoder.tree):
            self.serializer.write_symbol(symbol)
        bits = encoder.encode(symbols, logger)
        return pack(decoder.tree, bits, len(symbols), self.serializer.code)

    def decompress(self, container: CompressedContainer, logger: Optional[Logger] = None) -> List[Any]:
        """
        Decompress a container back into its symbols.

        Args:
            container (CompressedContainer): The container.
            logger (Optional[Logger]): Logger instance for logging.

        Returns:
            List[Any]: The decoded symbols.
        """
        return unpack(container, logger)


class HuffmanCodecByte(HuffmanCodec):
    def __init__(self) -> None:
        super().__init__(ByteSymbolSerializer())

    def compress(self, data: bytes, logger: Optional[Logger] = None) -> CompressedContainer:
        """
        Compress raw bytes, one symbol per byte.

        Args:
            data (bytes): The data to compress.
            logger (Optional[Logger]): Logger instance for logging.

        Returns:
            CompressedContainer: The resulting container.
        """
        validate_type(data, "Data", bytes)
        return self._compress_with_table(FrequencyTable.from_bytes(data), data, logger)

    def decompress(self, container: CompressedContainer, logger: Optional[Logger] = None) -> bytes:
        """
        Decompress a container produced by compress.

        Returns:
            bytes: The decompressed data.
        """
        if not isinstance(container, CompressedContainer):
            raise ValueError("Input must be a CompressedContainer instance")
        if container.serializer_code != self.serializer.code:
            raise ValueError("Container does not hold byte symbols")
        return bytes(super().decompress(container, logger))


class HuffmanCodecFile(HuffmanCodec):
    def compress(self, input_path: str, output_path: str, logger: Optional[Logger] = None) -> None:
        """
        Compress the input file and write the container to an output file.

        Args:
            input_path (str): Path to the input file.
            output_path (str): Path to the output file.
            logger (Optional[Logger]): Logger instance for logging.
        """
        validate_type(input_path, "Input path", str)
        validate_type(output_path, "Output path", str)
        validate_file_exists(input_path)

        with open(input_path, "rb") as file:
            data = file.read()

        container = super().compress(self.serializer.symbols_from_bytes(data), logger)
        CompressedContainerFile.write_to_file(container, output_path, logger)

    def decompress(self, compressed_file_path: str, output_file_path: str, logger: Optional[Logger] = None) -> None:
        """
        Decompress the input file and write the decompressed data to an output file.

        Args:
            compressed_file_path (str): Path to the compressed file.
            output_file_path (str): Path to the output file.
            logger (Optional[Logger]): Logger instance for logging.
        """
        validate_type(compressed_file_path, "Compressed file path", str)
        validate_type(output_file_path, "Output file path", str)
        validate_file_exists(compressed_file_path)

        container = CompressedContainerFile.read_from_file(compressed_file_path, logger)
        serializer = get_serializer(container.serializer_code)
        symbols = super().decompress(container, logger)
        with open(output_file_path, "wb") as file:
            file.write(serializer.symbols_to_bytes(symbols))
