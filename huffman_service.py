# filename: huffman_service.py

import logging

from huffman_core import HuffmanLogic, STRATEGY_RESORT

logger = logging.getLogger(__name__)


class StreamIOError(OSError):
    """A source or sink could not be read or written."""

    def __init__(self, action, path, reason):
        super().__init__(f"error {action} {path}: {reason}")
        self.path = path


def read_all(path, encoding="utf-8"):
    try:
        with open(path, "r", encoding=encoding, newline="") as f:
            return f.read()
    except (OSError, UnicodeDecodeError) as exc:
        raise StreamIOError("reading", path, exc) from exc


def write_all(path, content, encoding="utf-8"):
    try:
        with open(path, "w", encoding=encoding, newline="") as f:
            f.write(content)
    except OSError as exc:
        raise StreamIOError("writing", path, exc) from exc


class HuffmanService:
    def __init__(self, strategy=STRATEGY_RESORT, encoding="utf-8"):
        self.logic = HuffmanLogic(strategy)
        self.encoding = encoding

    def build(self, source_text):
        """Frequency table, tree root and codebook for ``source_text``."""
        freqs = self.logic.count_frequencies(source_text)
        root = self.logic.build_tree(freqs)
        codes = self.logic.generate_codes(root)
        return freqs, root, codes

    def compress(self, text):
        _, root, codes = self.build(text)
        return self.logic.encode(text, codes), root

    def decompress(self, bits, root):
        return self.logic.decode(bits, root)

    def format_frequencies(self, freqs):
        return [f"{char}: {freq}" for char, freq in self.logic.sorted_frequencies(freqs)]

    def format_codes(self, root):
        codes = self.logic.generate_codes(root)
        return [
            f"Character: {char}, Code: {codes[char]}"
            for char, _ in self.logic.walk_leaves(root)
        ]

    def load_tree(self, source_path):
        source_text = read_all(source_path, self.encoding)
        logger.info("read %d characters from %s", len(source_text), source_path)
        return self.build(source_text)

    def encrypt_file(self, source_path, input_path, output_path):
        """Encode ``input_path`` with the tree of ``source_path`` into ``output_path``.

        The bit file carries no tree; decrypting it needs the same source text.
        Returns the tree root and the number of bits written.
        """
        _, root, codes = self.load_tree(source_path)
        return root, self.encode_file(codes, input_path, output_path)

    def decrypt_file(self, source_path, input_path, output_path):
        _, root, _ = self.load_tree(source_path)
        return root, self.decode_file(root, input_path, output_path)

    def encode_file(self, codes, input_path, output_path):
        text = read_all(input_path, self.encoding)
        bits = self.logic.encode(text, codes)
        write_all(output_path, bits, self.encoding)
        logger.info("wrote %d bits to %s", len(bits), output_path)
        return len(bits)

    def decode_file(self, root, input_path, output_path):
        bits = read_all(input_path, self.encoding)
        text = self.logic.decode(bits, root)
        write_all(output_path, text, self.encoding)
        logger.info("wrote %d characters to %s", len(text), output_path)
        return len(text)
