# filename: huffman_errors.py


class HuffmanError(Exception):
    kind = "HuffmanError"


class EmptyInputError(HuffmanError):
    """Raised when a tree is requested for a frequency table with no entries."""
    kind = "EmptyInputError"


class MalformedHeaderError(HuffmanError):
    """The data is not a container, or its header fields disagree."""
    kind = "MalformedHeaderError"


class TruncatedStreamError(HuffmanError):
    """The payload ran out of valid bits in the middle of a code."""
    kind = "TruncatedStreamError"


class CorruptStreamError(HuffmanError):
    """The payload contains a code that no symbol owns."""
    kind = "CorruptStreamError"
