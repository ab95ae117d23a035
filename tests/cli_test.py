import io
import os
import struct
import tempfile
import unittest
from contextlib import redirect_stderr

from huffcodec.__main__ import main, default_output_path
from huffcodec.settings import FILE_EXTENSION, FILE_SIGNATURE, VERSION

class TestCommandLine(unittest.TestCase):
    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.input_path = os.path.join(self.temp_dir.name, "input.bin")
        self.compressed_path = os.path.join(self.temp_dir.name, "input.bin.huf")
        self.output_path = os.path.join(self.temp_dir.name, "output.bin")

    def tearDown(self):
        self.temp_dir.cleanup()

    def write_input(self, data):
        with open(self.input_path, "wb") as file:
            file.write(data)

    def test_compress_then_decompress(self):
        data = b"This is a test" * 100
        self.write_input(data)
        self.assertEqual(main(["-c", self.input_path, self.compressed_path]), 0)
        self.assertEqual(main(["--decompress", self.compressed_path, self.output_path]), 0)
        with open(self.output_path, "rb") as file:
            self.assertEqual(file.read(), data)

    def test_char_symbols(self):
        data = "ünïcödé text".encode("utf-8")
        self.write_input(data)
        self.assertEqual(main(["-c", "--symbols", "char", self.input_path, self.compressed_path]), 0)
        self.assertEqual(main(["-d", self.compressed_path, self.output_path]), 0)
        with open(self.output_path, "rb") as file:
            self.assertEqual(file.read(), data)

    def test_modes_are_mutually_exclusive(self):
        self.write_input(b"abc")
        with redirect_stderr(io.StringIO()):
            with self.assertRaises(SystemExit):
                main(["-c", "-d", self.input_path, self.output_path])
            with self.assertRaises(SystemExit):
                main([self.input_path, self.output_path])

    def test_missing_input_reports_error(self):
        stderr = io.StringIO()
        with redirect_stderr(stderr):
            self.assertEqual(main(["-c", self.input_path, self.compressed_path]), 1)
        self.assertIn("Error:", stderr.getvalue())

    def test_empty_input_reports_error(self):
        self.write_input(b"")
        stderr = io.StringIO()
        with redirect_stderr(stderr):
            self.assertEqual(main(["-c", self.input_path, self.compressed_path]), 1)
        self.assertIn("empty input", stderr.getvalue())

    def test_decompress_garbage_reports_error(self):
        self.write_input(b"not a compressed file")
        stderr = io.StringIO()
        with redirect_stderr(stderr):
            self.assertEqual(main(["-d", self.input_path, self.output_path]), 1)
        self.assertIn("signature", stderr.getvalue())

    def test_default_output_paths(self):
        data = b"default names" * 20
        self.write_input(data)
        self.assertEqual(main(["-c", self.input_path]), 0)
        self.assertTrue(os.path.exists(self.input_path + FILE_EXTENSION))
        os.remove(self.input_path)
        self.assertEqual(main(["-d", self.input_path + FILE_EXTENSION]), 0)
        with open(self.input_path, "rb") as file:
            self.assertEqual(file.read(), data)

    def test_default_output_path_without_extension(self):
        self.assertEqual(default_output_path("data.bin", True), "data.bin" + FILE_EXTENSION)
        self.assertEqual(default_output_path("data.bin", False), "data.bin.out")
        self.assertEqual(default_output_path("data" + FILE_EXTENSION, False), "data")

    def test_decompress_huge_symbol_count_reports_error(self):
        with open(self.compressed_path, "wb") as file:
            file.write(FILE_SIGNATURE + VERSION.to_bytes(2, "big"))
            file.write(struct.pack("<IQQ", 1, 0, 2 ** 63))
            file.write(struct.pack("<I", 2) + bytes([1, 65]))
            file.write(struct.pack("<I", 0))
        stderr = io.StringIO()
        with redirect_stderr(stderr):
            self.assertEqual(main(["-d", self.compressed_path, self.output_path]), 1)
        self.assertIn("Error:", stderr.getvalue())
        self.assertFalse(os.path.exists(self.output_path))

if __name__ == '__main__':
    unittest.main()
