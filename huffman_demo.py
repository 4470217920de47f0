"""
Huffman coding demo

Encodes a message, prints the code table, then decodes the bits again
with the same tree.

How to run:
  python huffman_demo.py
  python huffman_demo.py "abracadabra" --sorted
"""

from __future__ import annotations

import argparse
import sys
from typing import Dict, List, Optional

import huffman as huff


def format_codes(codes: Dict[str, str], by_length: bool = False) -> List[str]:
    items = list(codes.items())
    if by_length:
        items.sort(key=lambda kv: (len(kv[1]), kv[0]))
    return [f"{symbol!r}: {code}" for symbol, code in items]


def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="Encode and decode a message with Huffman coding")
    ap.add_argument("message", nargs="?", default="hello world", help="Text to encode")
    ap.add_argument("--sorted", action="store_true", help="Order the code table by code length")
    args = ap.parse_args(argv)

    ft = huff.count_frequencies(args.message)
    try:
        root = huff.build_tree(ft)
        codes = huff.derive_codes(root)
        encoded = huff.encode(args.message, codes)
        decoded = huff.decompress_text(encoded, root)
    except huff.HuffmanError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    print("Original message:", args.message)
    print("Encoded message:", encoded)
    print("Huffman codes:")
    for line in format_codes(codes, by_length=args.sorted):
        print(line)
    print("Decoded message:", decoded)
    print(f"{len(encoded)} bits ({len(args.message) * 8} uncompressed), "
          f"avg {huff.average_code_length(codes, ft):.3f} bits/symbol, "
          f"entropy {huff.entropy(ft):.3f}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
