"""
Command line interface for huffcodec.
"""

import argparse
import sys
from typing import List, Optional

from .codecs import HuffmanCodecFile
from .logger import Logger
from .serializers import ByteSymbolSerializer, StringSymbolSerializer
from .settings import FILE_EXTENSION

SERIALIZERS = {
    'byte': ByteSymbolSerializer,
    'char': StringSymbolSerializer,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='huffcodec',
        description='Huffman file compressor',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
Examples:
  python -m huffcodec -c notes.txt                 (writes notes.txt{FILE_EXTENSION})
  python -m huffcodec -d notes.txt{FILE_EXTENSION}             (writes notes.txt)
  python -m huffcodec -c --symbols char notes.txt packed{FILE_EXTENSION}
        """
    )

    mode = parser.add_mutually_exclusive_group(required=True)
    mode.add_argument('-c', '--compress', action='store_true', help='Compress input file into output file')
    mode.add_argument('-d', '--decompress', action='store_true', help='Decompress input file into output file')

    parser.add_argument('input', help='Input file')
    parser.add_argument('output', nargs='?', default=None,
                        help=f'Output file (default: derived from input and the {FILE_EXTENSION} extension)')
    parser.add_argument('--symbols', choices=sorted(SERIALIZERS), default='byte',
                        help='Unit treated as one symbol when compressing')
    parser.add_argument('-v', '--verbose', action='store_true', help='Display info logs')
    return parser


def default_output_path(input_path: str, compress: bool) -> str:
    """Append the extension when compressing, strip it when decompressing."""
    if compress:
        return input_path + FILE_EXTENSION
    if input_path.endswith(FILE_EXTENSION) and len(input_path) > len(FILE_EXTENSION):
        return input_path[:-len(FILE_EXTENSION)]
    return input_path + '.out'


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    output = args.output
    if output is None:
        output = default_output_path(args.input, args.compress)

    logger = Logger()
    logger.display_info = args.verbose

    codec = HuffmanCodecFile(SERIALIZERS[args.symbols]())

    try:
        if args.compress:
            codec.compress(args.input, output, logger)
        else:
            codec.decompress(args.input, output, logger)
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
