"""
huffcodec: A Python library for deterministic Huffman compression and decompression.
"""

from .models import (
    FrequencyTable,
)

from .tree import (
    Leaf,
    Branch,
    WeightedNode,
    build_tree,
    iter_leaves,
    tree_depth,
)

from .coders import (
    derive_codewords,
    pack_bits_to_bytes,
    unpack_bytes_to_bits,
    HuffmanEncoder,
    HuffmanDecoder,
    build_encoder_decoder_pair,
)

from .serializers import (
    BaseSymbolSerializer,
    ByteSymbolSerializer,
    StringSymbolSerializer,
    IntSymbolSerializer,
    get_serializer,
    serialize_tree,
    deserialize_tree,
)

from .codecs import (
    CompressedContainer,
    CompressedContainerFile,
    pack,
    unpack,
    HuffmanCodec,
    HuffmanCodecByte,
    HuffmanCodecFile,
)

from .errors import (
    UnknownSymbolError,
    EmptyInputError,
    MalformedContainerError,
    DecodeError,
)

from .settings import VERSION

from .logger import (
    Logger,
    Log,
    LogLevel,
    TreeConstructionLog,
    CodingLog,
    ContainerLog,
    CodingProgressStep,
)

# Validators
from .validators import *

__version__ = "0.1.0"

__all__ = [

    "FrequencyTable",

    "Leaf",
    "Branch",
    "WeightedNode",
    "build_tree",
    "iter_leaves",
    "tree_depth",

    "derive_codewords",
    "pack_bits_to_bytes",
    "unpack_bytes_to_bits",
    "HuffmanEncoder",
    "HuffmanDecoder",
    "build_encoder_decoder_pair",

    "BaseSymbolSerializer",
    "ByteSymbolSerializer",
    "StringSymbolSerializer",
    "IntSymbolSerializer",
    "get_serializer",
    "serialize_tree",
    "deserialize_tree",

    "CompressedContainer",
    "CompressedContainerFile",
    "pack",
    "unpack",
    "HuffmanCodec",
    "HuffmanCodecByte",
    "HuffmanCodecFile",

    "UnknownSymbolError",
    "EmptyInputError",
    "MalformedContainerError",
    "DecodeError",

    "VERSION",

    "Logger",
    "Log",
    "LogLevel",
    "TreeConstructionLog",
    "CodingLog",
    "ContainerLog",
    "CodingProgressStep",
]
