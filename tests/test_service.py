import os
import sys
import pytest

REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if REPO_ROOT not in sys.path:
	sys.path.insert(0, REPO_ROOT)

import huffman_core as hc
import huffman_service as hs


BOOK = "It was the best of times, it was the worst of times.\nÉté über alles!\n"


def _write(path, text):
	path.write_text(text, encoding="utf-8")
	return path


def test_service_initializes_logic_attribute():
	svc = hs.HuffmanService()
	assert isinstance(svc.logic, hc.HuffmanLogic)
	assert svc.logic.strategy == hc.STRATEGY_RESORT


def test_compress_decompress_round_trip():
	svc = hs.HuffmanService()
	bits, root = svc.compress(BOOK)
	assert set(bits) <= {"0", "1"}
	assert svc.decompress(bits, root) == BOOK


def test_compress_empty_text_raises():
	with pytest.raises(hc.ConstructionError):
		hs.HuffmanService().compress("")


def test_format_frequencies_lines():
	svc = hs.HuffmanService()
	freqs, _, _ = svc.build("aaabbc")
	assert svc.format_frequencies(freqs) == ["a: 3", "b: 2", "c: 1"]


def test_format_codes_lines():
	svc = hs.HuffmanService()
	_, root, _ = svc.build("aaabbc")
	assert svc.format_codes(root) == [
		"Character: a, Code: 0",
		"Character: c, Code: 10",
		"Character: b, Code: 11",
	]


def test_encrypt_then_decrypt_files(tmp_path):
	book = _write(tmp_path / "book.txt", BOOK)
	begin = _write(tmp_path / "begin.txt", "it was the best of times")
	encrypted = tmp_path / "encrypted.txt"
	decrypted = tmp_path / "decrypted.txt"

	svc = hs.HuffmanService()
	_, bit_count = svc.encrypt_file(book, begin, encrypted)
	bits = encrypted.read_text(encoding="utf-8")
	assert len(bits) == bit_count
	assert set(bits) <= {"0", "1"}

	_, char_count = svc.decrypt_file(book, encrypted, decrypted)
	assert decrypted.read_text(encoding="utf-8") == "it was the best of times"
	assert char_count == len("it was the best of times")


def test_sink_overwrites_existing_content(tmp_path):
	target = _write(tmp_path / "out.txt", "x" * 500)
	hs.write_all(target, "01")
	assert target.read_text(encoding="utf-8") == "01"


def test_crlf_survives_round_trip(tmp_path):
	book = tmp_path / "book.txt"
	book.write_bytes("line one\r\nline two\r\n".encode("utf-8"))
	encrypted = tmp_path / "encrypted.txt"
	decrypted = tmp_path / "decrypted.txt"

	svc = hs.HuffmanService()
	svc.encrypt_file(book, book, encrypted)
	svc.decrypt_file(book, encrypted, decrypted)
	assert decrypted.read_bytes() == book.read_bytes()


def test_input_character_missing_from_source(tmp_path):
	book = _write(tmp_path / "book.txt", "aaabbc")
	begin = _write(tmp_path / "begin.txt", "abcd")
	with pytest.raises(hc.UnknownSymbolError) as excinfo:
		hs.HuffmanService().encrypt_file(book, begin, tmp_path / "encrypted.txt")
	assert excinfo.value.symbol == "d"
	assert not (tmp_path / "encrypted.txt").exists()


def test_decrypt_truncated_file(tmp_path):
	book = _write(tmp_path / "book.txt", BOOK)
	encrypted = tmp_path / "encrypted.txt"
	svc = hs.HuffmanService()
	svc.encrypt_file(book, book, encrypted)
	_write(encrypted, encrypted.read_text(encoding="utf-8")[:-1])
	with pytest.raises(hc.TruncatedStreamError):
		svc.decrypt_file(book, encrypted, tmp_path / "decrypted.txt")


def test_missing_source_is_stream_io_error(tmp_path):
	missing = tmp_path / "nope.txt"
	with pytest.raises(hs.StreamIOError) as excinfo:
		hs.HuffmanService().load_tree(missing)
	assert excinfo.value.path == missing
	assert isinstance(excinfo.value, OSError)
	assert not isinstance(excinfo.value, hc.HuffmanError)


def test_undecodable_source_is_stream_io_error(tmp_path):
	bad = tmp_path / "bad.txt"
	bad.write_bytes(b"\xff\xfe\xfa")
	with pytest.raises(hs.StreamIOError):
		hs.read_all(bad)


def test_unwritable_sink_is_stream_io_error(tmp_path):
	with pytest.raises(hs.StreamIOError):
		hs.write_all(tmp_path / "no-such-dir" / "out.txt", "0101")


def test_heap_strategy_files_round_trip(tmp_path):
	book = _write(tmp_path / "book.txt", BOOK)
	encrypted = tmp_path / "encrypted.txt"
	decrypted = tmp_path / "decrypted.txt"
	svc = hs.HuffmanService(strategy=hc.STRATEGY_HEAP)
	svc.encrypt_file(book, book, encrypted)
	svc.decrypt_file(book, encrypted, decrypted)
	assert decrypted.read_text(encoding="utf-8") == BOOK
