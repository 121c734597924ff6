# filename: huffman_container.py

"""
On-disk layout of a compressed file.

All integers are big-endian.

    [4B]  MAGIC  b"HUFF"
    [1B]  format version
    [1B]  table mode (0 = frequencies, 1 = codes)
    [8B]  original length in bytes
    [2B]  entry count (0..256)
    entries
        mode 0: [1B] symbol, [8B] count
        mode 1: [1B] symbol, [1B] bit length, ceil(bit length / 8) bytes of
                code, MSB first, zero filled
    [1B]  padding bit count (0..7)
    [8B]  payload length in bytes
    [N B] payload
"""
import logging
import struct
from collections import namedtuple

from huffman_errors import MalformedHeaderError

logger = logging.getLogger(__name__)

MAGIC = b"HUFF"
VERSION = 1

MODE_FREQUENCIES = 0
MODE_CODES = 1
TABLE_MODES = {"frequencies": MODE_FREQUENCIES, "codes": MODE_CODES}

_PREAMBLE = struct.Struct(">4sBBQH")
_FREQ_ENTRY = struct.Struct(">BQ")
_CODE_ENTRY = struct.Struct(">BB")
_TRAILER = struct.Struct(">BQ")

MAX_ENTRIES = 256

ContainerHeader = namedtuple(
    "ContainerHeader", "mode original_length table padding payload"
)


def _pack_code(code):
    nbytes = (len(code) + 7) // 8
    return int(code.ljust(nbytes * 8, "0"), 2).to_bytes(nbytes, "big")


def _unpack_code(raw, length):
    return format(int.from_bytes(raw, "big"), f"0{len(raw) * 8}b")[:length]


def encode_container(mode, original_length, table, payload, padding):
    if mode not in TABLE_MODES.values():
        raise ValueError(f"unknown table mode {mode}")
    if len(table) > MAX_ENTRIES:
        raise ValueError(f"table has {len(table)} entries, at most {MAX_ENTRIES} allowed")

    out = bytearray(_PREAMBLE.pack(MAGIC, VERSION, mode, original_length, len(table)))
    for symbol in sorted(table):
        if mode == MODE_FREQUENCIES:
            out += _FREQ_ENTRY.pack(symbol, table[symbol])
        else:
            code = table[symbol]
            out += _CODE_ENTRY.pack(symbol, len(code))
            out += _pack_code(code)
    out += _TRAILER.pack(padding, len(payload))
    out += payload
    logger.debug(
        "container: mode=%d entries=%d header=%d payload=%d padding=%d",
        mode, len(table), len(out) - len(payload), len(payload), padding,
    )
    return bytes(out)


def decode_container(data):
    """Parse container bytes into a ContainerHeader.

    Raises MalformedHeaderError when any field is structurally inconsistent
    with the others or with the amount of data present.
    """
    if len(data) < _PREAMBLE.size:
        raise MalformedHeaderError(
            f"container is {len(data)} bytes, header needs at least {_PREAMBLE.size}"
        )
    magic, version, mode, original_length, count = _PREAMBLE.unpack_from(data, 0)
    if magic != MAGIC:
        raise MalformedHeaderError(f"bad magic {magic!r}")
    if version != VERSION:
        raise MalformedHeaderError(f"unsupported format version {version}")
    if mode not in TABLE_MODES.values():
        raise MalformedHeaderError(f"unknown table mode {mode}")
    if count > MAX_ENTRIES:
        raise MalformedHeaderError(f"entry count {count} exceeds {MAX_ENTRIES}")

    offset = _PREAMBLE.size
    table = {}
    for _ in range(count):
        if mode == MODE_FREQUENCIES:
            if offset + _FREQ_ENTRY.size > len(data):
                raise MalformedHeaderError("frequency table runs past end of data")
            symbol, value = _FREQ_ENTRY.unpack_from(data, offset)
            offset += _FREQ_ENTRY.size
            if value == 0:
                raise MalformedHeaderError(f"zero count for symbol {symbol}")
        else:
            if offset + _CODE_ENTRY.size > len(data):
                raise MalformedHeaderError("code table runs past end of data")
            symbol, length = _CODE_ENTRY.unpack_from(data, offset)
            offset += _CODE_ENTRY.size
            if length == 0:
                raise MalformedHeaderError(f"zero-length code for symbol {symbol}")
            nbytes = (length + 7) // 8
            if offset + nbytes > len(data):
                raise MalformedHeaderError("code table runs past end of data")
            value = _unpack_code(data[offset:offset + nbytes], length)
            offset += nbytes
        if symbol in table:
            raise MalformedHeaderError(f"duplicate entry for symbol {symbol}")
        table[symbol] = value

    if offset + _TRAILER.size > len(data):
        raise MalformedHeaderError("header truncated before payload length")
    padding, payload_length = _TRAILER.unpack_from(data, offset)
    offset += _TRAILER.size
    if padding > 7:
        raise MalformedHeaderError(f"padding bit count {padding} outside 0-7")
    if payload_length != len(data) - offset:
        raise MalformedHeaderError(
            f"payload length {payload_length} does not match "
            f"{len(data) - offset} remaining bytes"
        )
    if padding and not payload_length:
        raise MalformedHeaderError("padding declared for an empty payload")
    if payload_length and not table:
        raise MalformedHeaderError("payload present without a symbol table")
    if bool(table) != bool(original_length):
        raise MalformedHeaderError(
            f"{len(table)} table entries for an original length of {original_length}"
        )
    if mode == MODE_FREQUENCIES and sum(table.values()) != original_length:
        raise MalformedHeaderError(
            f"frequencies sum to {sum(table.values())}, expected {original_length}"
        )

    return ContainerHeader(mode, original_length, table, padding, bytes(data[offset:]))
