import unittest
import numpy as np

from huffcodec.coders import (
    derive_codewords,
    pack_bits_to_bytes,
    unpack_bytes_to_bits,
    HuffmanEncoder,
    HuffmanDecoder,
    build_encoder_decoder_pair,
)
from huffcodec.errors import DecodeError, EmptyInputError, UnknownSymbolError
from huffcodec.models import FrequencyTable
from huffcodec.tree import Leaf, Branch, build_tree
from huffcodec.logger import Logger, CodingLog, CodingProgressStep


def tree_from(counts):
    table = FrequencyTable()
    for symbol, count in counts:
        table.add(symbol, count)
    return build_tree(table)


def encode_decode(gen_codes, encode):
    table = FrequencyTable()
    table.add_from_iterable(gen_codes)
    encoder, decoder = build_encoder_decoder_pair(table)
    bits = encoder.encode(encode)
    return decoder.decode(bits, len(bits))


class TestBitPacking(unittest.TestCase):
    def test_pack_full_byte(self):
        bits = [1, 0, 1, 0, 1, 0, 1, 0]
        self.assertEqual(pack_bits_to_bytes(bits), bytes([0b10101010]))

    def test_pack_padding_in_low_bits(self):
        self.assertEqual(pack_bits_to_bytes([True, False, True]), bytes([0b10100000]))

    def test_pack_nine_bits(self):
        bits = [1, 0, 1, 0, 1, 0, 1, 0, 1]
        self.assertEqual(pack_bits_to_bytes(bits), bytes([0b10101010, 0b10000000]))

    def test_pack_empty(self):
        self.assertEqual(pack_bits_to_bytes([]), b"")

    def test_unpack_msb_first(self):
        bits = unpack_bytes_to_bits(bytes([0b11001010]))
        self.assertEqual(bits, [True, True, False, False, True, False, True, False])

    def test_unpack_trims_padding(self):
        bits = unpack_bytes_to_bits(bytes([0b10100000]), 3)
        self.assertEqual(bits, [True, False, True])

    def test_unpack_keeps_real_trailing_zeros(self):
        bits = unpack_bytes_to_bits(bytes([0b10000000]), 5)
        self.assertEqual(bits, [True, False, False, False, False])

    def test_unpack_bit_count_too_large(self):
        with self.assertRaises(DecodeError):
            unpack_bytes_to_bits(bytes([0xFF]), 9)

    def test_invalid_input(self):
        with self.assertRaises(ValueError):
            pack_bits_to_bytes(None)
        with self.assertRaises(ValueError):
            unpack_bytes_to_bits(None)


class TestDeriveCodewords(unittest.TestCase):
    def test_three_symbols(self):
        codewords = derive_codewords(tree_from([("A", 10), ("B", 2), ("C", 2)]))
        self.assertEqual(codewords, {
            "A": (False,),
            "C": (True, False),
            "B": (True, True),
        })

    def test_single_leaf_has_empty_codeword(self):
        self.assertEqual(derive_codewords(Leaf("A")), {"A": ()})

    def test_prefix_property(self):
        counts = [(i, (i * 37) % 11 + 1) for i in range(40)]
        codewords = list(derive_codewords(tree_from(counts)).values())
        self.assertEqual(len(codewords), 40)
        for i, first in enumerate(codewords):
            for j, second in enumerate(codewords):
                if i != j:
                    self.assertNotEqual(second[:len(first)], first)

    def test_invalid_tree(self):
        with self.assertRaises(ValueError):
            derive_codewords("A")


class TestHuffmanEncoder(unittest.TestCase):
    def test_unknown_symbol_reports_symbol(self):
        encoder = HuffmanEncoder.from_tree(tree_from([("A", 2), ("B", 2)]))
        with self.assertRaises(UnknownSymbolError) as ctx:
            encoder.encode(["A", "C", "D"])
        self.assertEqual(ctx.exception.symbol, "C")

    def test_unknown_symbol_is_value_error(self):
        encoder = HuffmanEncoder.from_tree(Leaf("A"))
        with self.assertRaises(ValueError):
            encoder.encode("AB")

    def test_two_symbols(self):
        encoder = HuffmanEncoder.from_tree(tree_from([("A", 2), ("B", 2)]))
        self.assertEqual(encoder.encode(["B", "A"]), [False, True])

    def test_three_symbols(self):
        encoder = HuffmanEncoder.from_tree(tree_from([("A", 10), ("B", 2), ("C", 2)]))
        literal = ["A", "A", "B", "A", "A", "C", "C", "A", "A", "A", "A", "B", "A"]
        bits = encoder.encode(literal)
        self.assertEqual(len(bits), 17)
        self.assertEqual(pack_bits_to_bytes(bits), bytes([0b110010, 0b10000011, 0b0]))

    def test_four_symbols(self):
        encoder = HuffmanEncoder.from_tree(tree_from([("A", 9), ("B", 5), ("C", 2), ("D", 2)]))
        literal = ["A", "B", "B", "A", "C", "D", "A", "A", "B", "A", "A", "B", "A", "A", "B", "C", "D", "A"]
        bits = encoder.encode(iter(literal))
        self.assertEqual(len(bits), 31)
        self.assertEqual(pack_bits_to_bytes(bits), bytes([0b01010011, 0b11100010, 0b00100010, 0b11111000]))

    def test_from_symbols(self):
        literal = ["B", "A", "A", "A", "A", "C"]
        encoder = HuffmanEncoder.from_symbols(literal)
        self.assertEqual(pack_bits_to_bytes(encoder.encode(literal)), bytes([0b11000010]))

    def test_from_symbols_empty(self):
        with self.assertRaises(EmptyInputError):
            HuffmanEncoder.from_symbols([])

    def test_single_symbol_encodes_to_zero_bits(self):
        encoder = HuffmanEncoder.from_symbols("AAAA")
        self.assertEqual(encoder.encode("AAAAAAA"), [])

    def test_logging(self):
        logger = Logger()
        encoder = HuffmanEncoder.from_tree(tree_from([("A", 2), ("B", 2)]))
        encoder.encode("ABBA", logger)
        coding_logs = [log for log in logger.logs if isinstance(log, CodingLog)]
        self.assertEqual(len(coding_logs), 1)
        self.assertEqual(coding_logs[0].symbol_count, 4)
        self.assertEqual(coding_logs[0].encoded_bits, 4)

    def test_no_progress_steps_when_progress_is_off(self):
        logger = Logger()
        encoder = HuffmanEncoder.from_tree(tree_from([("A", 2), ("B", 2)]))
        encoder.encode("ABBA", logger)
        self.assertEqual(logger.coding_progress_count, 0)
        self.assertFalse(any(isinstance(log, CodingProgressStep) for log in logger.logs))

    def test_progress_steps_carry_total(self):
        logger = Logger()
        logger.record_progress = True
        encoder = HuffmanEncoder.from_tree(tree_from([("A", 2), ("B", 2)]))
        encoder.encode("ABBA", logger)
        steps = [log for log in logger.logs if isinstance(log, CodingProgressStep)]
        self.assertEqual(len(steps), 4)
        self.assertEqual(steps[-1].message, "Encoding symbols (4/4)")

    def test_invalid_codewords(self):
        with self.assertRaises(ValueError):
            HuffmanEncoder([("A", (False,))])


class TestHuffmanDecoder(unittest.TestCase):
    def test_two_symbols(self):
        literal = ["B", "A"]
        self.assertEqual(encode_decode(literal, literal), literal)

    def test_two_symbols_longer(self):
        literal = ["B", "A", "B", "B", "B", "B", "A", "B"]
        self.assertEqual(encode_decode(literal, literal), literal)

    def test_three_symbols(self):
        literal = ["B", "A", "B", "B", "B", "B", "C", "B", "C", "C", "C"]
        self.assertEqual(encode_decode(literal, literal), literal)

    def test_english_text(self):
        literal = list("Hello there! General Kenobi!!?")
        self.assertEqual(encode_decode(literal, literal), literal)

    def test_decoder_is_reusable(self):
        tree = tree_from([("A", 3), ("B", 2), ("C", 1)])
        encoder = HuffmanEncoder.from_tree(tree)
        decoder = HuffmanDecoder(tree)
        for literal in (["A", "B"], ["C", "C", "A"], ["B"]):
            bits = encoder.encode(literal)
            self.assertEqual(decoder.decode(bits, len(bits)), literal)
        self.assertIs(decoder.tree, tree)

    def test_decode_stops_at_bit_count(self):
        tree = Branch(Leaf("A"), Leaf("B"))
        decoder = HuffmanDecoder(tree)
        padded = [True, False, True, False, False, False, False, False]
        self.assertEqual(decoder.decode(padded, 3), ["B", "A", "B"])

    def test_decode_numpy_bits(self):
        decoder = HuffmanDecoder(Branch(Leaf("A"), Leaf("B")))
        self.assertEqual(decoder.decode(np.array([0, 1, 1], dtype=np.uint8)), ["A", "B", "B"])

    def test_truncated_codeword(self):
        decoder = HuffmanDecoder(Branch(Leaf("A"), Branch(Leaf("C"), Leaf("B"))))
        with self.assertRaises(DecodeError):
            decoder.decode([False, True], 2)

    def test_bit_count_exceeds_bits(self):
        decoder = HuffmanDecoder(Branch(Leaf("A"), Leaf("B")))
        with self.assertRaises(DecodeError):
            decoder.decode([False], 2)

    def test_symbol_count_mismatch(self):
        decoder = HuffmanDecoder(Branch(Leaf("A"), Leaf("B")))
        with self.assertRaises(DecodeError):
            decoder.decode([False, True], 2, symbol_count=3)

    def test_single_leaf_uses_symbol_count(self):
        decoder = HuffmanDecoder(Leaf("A"))
        self.assertEqual(decoder.decode([], 0, symbol_count=4), ["A", "A", "A", "A"])
        self.assertEqual(decoder.decode([], 0, symbol_count=0), [])

    def test_single_leaf_without_symbol_count(self):
        decoder = HuffmanDecoder(Leaf("A"))
        with self.assertRaises(DecodeError):
            decoder.decode([], 0)

    def test_single_leaf_with_bits(self):
        decoder = HuffmanDecoder(Leaf("A"))
        with self.assertRaises(DecodeError):
            decoder.decode([False, False], 2, symbol_count=2)

    def test_single_leaf_symbol_count_too_large(self):
        decoder = HuffmanDecoder(Leaf("A"))
        with self.assertRaises(DecodeError):
            decoder.decode([], 0, symbol_count=2 ** 63)

    def test_decode_progress_steps(self):
        decoder = HuffmanDecoder(Branch(Leaf("A"), Leaf("B")))
        logger = Logger()
        decoder.decode([False, True, True], 3, symbol_count=3, logger=logger)
        self.assertEqual(logger.coding_progress_count, 0)

        logger.record_progress = True
        decoder.decode([False, True, True], 3, symbol_count=3, logger=logger)
        steps = [log for log in logger.logs if isinstance(log, CodingProgressStep)]
        self.assertEqual([step.message for step in steps], [
            "Decoding symbols (1/3)",
            "Decoding symbols (2/3)",
            "Decoding symbols (3/3)",
        ])

    def test_empty_bits_multi_leaf(self):
        decoder = HuffmanDecoder(Branch(Leaf("A"), Leaf("B")))
        self.assertEqual(decoder.decode([], 0), [])

    def test_invalid_tree(self):
        with self.assertRaises(ValueError):
            HuffmanDecoder(None)


class TestEncoderDecoderPair(unittest.TestCase):
    def test_empty_table(self):
        self.assertIsNone(build_encoder_decoder_pair(FrequencyTable()))

    def test_pair_shares_tree(self):
        encoder, decoder = build_encoder_decoder_pair({"x": 4, "y": 1, "z": 1})
        self.assertEqual(encoder.codewords, derive_codewords(decoder.tree))

    def test_round_trip_integers(self):
        literal = [5, 3, 5, 5, 1, 3, 5, 9, 9, 1, 5]
        self.assertEqual(encode_decode(literal, literal), literal)

if __name__ == '__main__':
    unittest.main()
