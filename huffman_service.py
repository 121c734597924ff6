# filename: huffman_service.py

import logging

from huffman_bits import BitPacker, BitUnpacker
from huffman_container import (
    MODE_FREQUENCIES,
    TABLE_MODES,
    decode_container,
    encode_container,
)
from huffman_core import HuffmanLogic, Leaf, is_phantom
from huffman_errors import (
    CorruptStreamError,
    EmptyInputError,
    MalformedHeaderError,
    TruncatedStreamError,
)

logger = logging.getLogger(__name__)


class HuffmanService:
    def __init__(self, table_mode="frequencies"):
        if table_mode not in TABLE_MODES:
            raise ValueError(
                f"table_mode must be one of {sorted(TABLE_MODES)}, got {table_mode!r}"
            )
        self.logic = HuffmanLogic()
        self.table_mode = table_mode
        self.mode = TABLE_MODES[table_mode]

    def compress(self, data):
        freqs = self.logic.count_frequencies(data)
        try:
            tree = self.logic.build_tree(freqs)
        except EmptyInputError:
            logger.debug("empty input, writing header-only container")
            return encode_container(self.mode, 0, {}, b"", 0)
        codes = self.logic.generate_codes(tree)

        # Integer codes avoid re-parsing the bit-string for every input byte
        lookup = {symbol: (int(code, 2), len(code)) for symbol, code in codes.items()}
        packer = BitPacker()
        for byte in data:
            packer.append_bits(*lookup[byte])
        payload, padding = packer.finalize()
        logger.debug(
            "encoded %d bytes over %d symbols into %d bits (%d padding)",
            len(data), len(codes), packer.bit_count, padding,
        )

        table = freqs if self.mode == MODE_FREQUENCIES else codes
        return encode_container(self.mode, len(data), table, payload, padding)

    def decompress(self, data):
        header = decode_container(data)
        if not header.table:
            return b""

        # The stored mode wins over the one this service was built with
        if header.mode == MODE_FREQUENCIES:
            root = self.logic.build_tree(header.table)
        else:
            root = self.logic.tree_from_codes(header.table)

        out = bytearray()
        node = root
        for bit in BitUnpacker(header.payload, header.padding):
            node = node.right if bit else node.left
            if isinstance(node, Leaf):
                if is_phantom(node):
                    raise CorruptStreamError(
                        f"code with no symbol after {len(out)} decoded bytes"
                    )
                out.append(node.symbol)
                node = root
        if node is not root:
            raise TruncatedStreamError(
                f"bitstream ended inside a code after {len(out)} decoded bytes"
            )
        if len(out) != header.original_length:
            raise MalformedHeaderError(
                f"decoded {len(out)} bytes, header declares {header.original_length}"
            )
        return bytes(out)

    def describe(self, data):
        header = decode_container(data)
        mode_name = {value: name for name, value in TABLE_MODES.items()}[header.mode]
        return {
            "mode": mode_name,
            "original_length": header.original_length,
            "entries": len(header.table),
            "padding_bits": header.padding,
            "payload_length": len(header.payload),
            "container_length": len(data),
            "ratio": len(data) / header.original_length if header.original_length else None,
        }

    def compress_file(self, input_path, output_path):
        with open(input_path, "rb") as f:
            data = f.read()
        compressed = self.compress(data)
        with open(output_path, "wb") as f:
            f.write(compressed)
        logger.info("compressed %s (%d bytes) -> %s (%d bytes)",
                    input_path, len(data), output_path, len(compressed))
        return len(data), len(compressed)

    def decompress_file(self, input_path, output_path):
        with open(input_path, "rb") as f:
            data = f.read()
        # Decode fully before opening the output so errors leave nothing behind
        restored = self.decompress(data)
        with open(output_path, "wb") as f:
            f.write(restored)
        logger.info("decompressed %s (%d bytes) -> %s (%d bytes)",
                    input_path, len(data), output_path, len(restored))
        return len(data), len(restored)
