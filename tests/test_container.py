import struct

import pytest

from huffman_container import (
	MAGIC,
	MODE_CODES,
	MODE_FREQUENCIES,
	VERSION,
	decode_container,
	encode_container,
)
from huffman_errors import MalformedHeaderError


def _preamble(mode=MODE_FREQUENCIES, original_length=0, count=0, magic=MAGIC, version=VERSION):
	return struct.pack(">4sBBQH", magic, version, mode, original_length, count)


def test_frequency_header_layout():
	data = encode_container(MODE_FREQUENCIES, 9, {99: 2, 97: 4, 98: 3}, b"\x0f\xe8", 2)
	assert data[:4] == b"HUFF"
	assert data[4] == VERSION
	assert data[5] == MODE_FREQUENCIES
	assert struct.unpack(">Q", data[6:14])[0] == 9
	assert struct.unpack(">H", data[14:16])[0] == 3
	# entries sorted by symbol
	assert data[16] == 97
	assert data[-2:] == b"\x0f\xe8"

	header = decode_container(data)
	assert header.mode == MODE_FREQUENCIES
	assert header.original_length == 9
	assert header.table == {97: 4, 98: 3, 99: 2}
	assert header.padding == 2
	assert header.payload == b"\x0f\xe8"


def test_code_header_keeps_long_codes():
	codes = {1: "0", 2: "10", 3: "1" * 11 + "0", 4: "1" * 12}
	data = encode_container(MODE_CODES, 4, codes, b"\x00", 1)
	assert decode_container(data).table == codes


def test_empty_container():
	data = encode_container(MODE_FREQUENCIES, 0, {}, b"", 0)
	assert len(data) == 16 + 9
	header = decode_container(data)
	assert header.table == {}
	assert header.payload == b""


def test_encode_rejects_unknown_mode():
	with pytest.raises(ValueError):
		encode_container(9, 0, {}, b"", 0)


@pytest.mark.parametrize("data", [
	b"",
	b"HUF",
	b"\x00" * 15,
	_preamble(magic=b"ZIP!") + struct.pack(">BQ", 0, 0),
	_preamble(version=VERSION + 1) + struct.pack(">BQ", 0, 0),
	_preamble(mode=7) + struct.pack(">BQ", 0, 0),
	_preamble(count=257),
	# entry count exceeds remaining bytes
	_preamble(original_length=5, count=2) + struct.pack(">BQ", 1, 5),
	# padding outside 0-7
	_preamble() + struct.pack(">BQ", 8, 0),
	# header truncated before payload length
	_preamble() + b"\x00\x00",
	# payload length disagrees with the bytes present
	_preamble(original_length=1, count=1) + struct.pack(">BQ", 1, 1) + struct.pack(">BQ", 7, 2) + b"\x00",
	# duplicate symbol
	_preamble(original_length=2, count=2) + struct.pack(">BQBQ", 1, 1, 1, 1) + struct.pack(">BQ", 6, 1) + b"\x00",
	# zero count
	_preamble(original_length=1, count=2) + struct.pack(">BQBQ", 1, 1, 2, 0) + struct.pack(">BQ", 7, 1) + b"\x00",
	# frequencies do not sum to the original length
	_preamble(original_length=3, count=1) + struct.pack(">BQ", 1, 1) + struct.pack(">BQ", 7, 1) + b"\x00",
	# padding on an empty payload
	_preamble() + struct.pack(">BQ", 3, 0),
	# payload without a table
	_preamble() + struct.pack(">BQ", 0, 1) + b"\x00",
	# zero-length code
	_preamble(mode=MODE_CODES, original_length=1, count=1) + struct.pack(">BB", 1, 0) + struct.pack(">BQ", 7, 1) + b"\x00",
	# code bytes run past the end
	_preamble(mode=MODE_CODES, original_length=1, count=1) + struct.pack(">BB", 1, 200),
])
def test_malformed_headers(data):
	with pytest.raises(MalformedHeaderError):
		decode_container(data)
