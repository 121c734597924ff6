# filename: huffman_core.py

import heapq
from collections import Counter, namedtuple

from huffman_errors import EmptyInputError, MalformedHeaderError

# Tree nodes are a tagged variant: traversal dispatches on the tuple type.
Leaf = namedtuple("Leaf", "symbol weight")
Internal = namedtuple("Internal", "weight left right")

# Sibling of the only leaf in a single-symbol tree. Owns no code.
PHANTOM = Leaf(None, 0)


def is_phantom(node):
    return isinstance(node, Leaf) and node.symbol is None


class HuffmanLogic:
    def count_frequencies(self, data):
        return dict(Counter(data))

    def build_tree(self, freqs):
        """Build the Huffman tree for a frequency table.

        Queue entries are ordered by (weight, sequence). Leaves are numbered
        in ascending symbol order and every merged node takes the next
        number, so the same table always yields the same tree. The first
        node popped becomes the left child.
        """
        if not freqs:
            raise EmptyInputError("cannot build a tree from an empty frequency table")

        priority_queue = []
        for seq, symbol in enumerate(sorted(freqs)):
            priority_queue.append((freqs[symbol], seq, Leaf(symbol, freqs[symbol])))
        heapq.heapify(priority_queue)

        if len(priority_queue) == 1:
            weight, _, only = priority_queue[0]
            return Internal(weight, only, PHANTOM)

        seq = len(priority_queue)
        while len(priority_queue) > 1:
            left_weight, _, left = heapq.heappop(priority_queue)
            right_weight, _, right = heapq.heappop(priority_queue)
            merged = Internal(left_weight + right_weight, left, right)
            heapq.heappush(priority_queue, (merged.weight, seq, merged))
            seq += 1

        return priority_queue[0][2]

    def generate_codes(self, node, current_code="", codes=None):
        if codes is None:
            codes = {}
        if isinstance(node, Leaf):
            if node.symbol is not None:
                codes[node.symbol] = current_code
            return codes
        self.generate_codes(node.left, current_code + "0", codes)
        self.generate_codes(node.right, current_code + "1", codes)
        return codes

    def is_prefix_free(self, codes):
        ordered = sorted(codes.values())
        for shorter, longer in zip(ordered, ordered[1:]):
            if longer.startswith(shorter):
                return False
        return True

    def tree_from_codes(self, codes):
        """Rebuild a decoding tree from an explicit symbol -> code table.

        Weights are not known in this direction and are left at zero.
        """
        if not codes:
            raise EmptyInputError("cannot build a tree from an empty code table")
        for symbol, code in codes.items():
            if not code or set(code) - {"0", "1"}:
                raise MalformedHeaderError(f"invalid code {code!r} for symbol {symbol}")
        if not self.is_prefix_free(codes):
            raise MalformedHeaderError("code table is not a prefix code")

        entries = sorted((code, symbol) for symbol, code in codes.items())
        return self._subtree(entries, 0, allow_gaps=len(entries) == 1)

    def _subtree(self, entries, depth, allow_gaps):
        if not entries:
            if allow_gaps:
                return PHANTOM
            raise MalformedHeaderError("code table leaves a branch without a symbol")
        if len(entries) == 1 and len(entries[0][0]) == depth:
            return Leaf(entries[0][1], 0)

        left = [entry for entry in entries if entry[0][depth] == "0"]
        right = [entry for entry in entries if entry[0][depth] == "1"]
        return Internal(
            0,
            self._subtree(left, depth + 1, allow_gaps),
            self._subtree(right, depth + 1, allow_gaps),
        )
