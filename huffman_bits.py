# filename: huffman_bits.py

from huffman_errors import MalformedHeaderError, TruncatedStreamError


class BitPacker:
    """Accumulates bits MSB-first into a byte buffer.

    Whole bytes move to ``buffer`` as soon as they are complete; up to seven
    pending bits wait in ``_acc``/``_pending``.
    """

    def __init__(self):
        self.buffer = bytearray()
        self._acc = 0
        self._pending = 0
        self._finalized = False
        self.bit_count = 0

    def append(self, code):
        """Append a bit-string such as ``"101"``."""
        self.append_bits(int(code, 2), len(code))

    def append_bits(self, value, nbits):
        if self._finalized:
            raise RuntimeError("BitPacker already finalized")
        self._acc = (self._acc << nbits) | (value & ((1 << nbits) - 1))
        self._pending += nbits
        self.bit_count += nbits
        while self._pending >= 8:
            self._pending -= 8
            self.buffer.append((self._acc >> self._pending) & 0xFF)
        self._acc &= (1 << self._pending) - 1

    def finalize(self):
        """Flush the partial byte and return ``(payload, padding)``."""
        padding = (8 - self.bit_count % 8) % 8
        if not self._finalized:
            if self._pending:
                self.buffer.append((self._acc << padding) & 0xFF)
                self._acc = 0
                self._pending = 0
            self._finalized = True
        return bytes(self.buffer), padding


class BitUnpacker:
    """Reads bits MSB-first, stopping at the last valid (non-padding) bit."""

    def __init__(self, buffer, padding=0):
        if not 0 <= padding <= 7:
            raise MalformedHeaderError(f"padding bit count {padding} outside 0-7")
        if padding and not buffer:
            raise MalformedHeaderError("padding declared for an empty payload")
        self.buffer = buffer
        self.valid_bits = len(buffer) * 8 - padding
        self.cursor = 0

    @property
    def remaining(self):
        return self.valid_bits - self.cursor

    @property
    def exhausted(self):
        return self.cursor >= self.valid_bits

    def read_bit(self):
        if self.exhausted:
            raise TruncatedStreamError(
                f"read past the last valid bit ({self.valid_bits} bits)"
            )
        byte = self.buffer[self.cursor >> 3]
        bit = (byte >> (7 - (self.cursor & 7))) & 1
        self.cursor += 1
        return bit

    def __iter__(self):
        while not self.exhausted:
            yield self.read_bit()
