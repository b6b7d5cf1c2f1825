"""
Command line front end

  huffman -p sample.txt probfile.txt
  huffman -s probfile.txt
  huffman -e probfile.txt data.txt data.txt.enc
  huffman -d probfile.txt data.txt.enc data.txt.new
"""

from __future__ import annotations

import argparse
import sys
from typing import List, Optional

import huffman as huff
import probability as prob
from huffman_errors import HuffmanError


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="huffman",
        description="Static Huffman coding driven by a probability file",
    )
    ops = ap.add_mutually_exclusive_group(required=True)
    ops.add_argument("-p", nargs=2, metavar=("SAMPLE", "PROBFILE"),
                     help="Estimate symbol probabilities of SAMPLE and write them to PROBFILE")
    ops.add_argument("-s", metavar="PROBFILE",
                     help="Build the code from PROBFILE and list it (see --codes-out)")
    ops.add_argument("-e", nargs=3, metavar=("PROBFILE", "DATA", "ENCODED"),
                     help="Encode DATA into ENCODED as '0'/'1' text")
    ops.add_argument("-d", nargs=3, metavar=("PROBFILE", "ENCODED", "DECODED"),
                     help="Decode ENCODED back into DECODED")

    ap.add_argument("--alphabet-size", type=int, default=prob.ASCII_SIZE,
                    help="Number of symbols in the alphabet, byte values 0..N-1 (default: 128)")
    ap.add_argument("--codes-out", type=str, default="codes.txt",
                    help="Code listing file written by -s (default: codes.txt)")
    return ap


def show_codes(prob_path, codes_out, alphabet_size: int) -> None:
    root = prob.tree_from_probability_file(prob_path, alphabet_size)
    lines = prob.format_code_listing(root, alphabet_size)
    prob.write_code_listing(codes_out, lines)

    print(f"Huffman codes [{prob.PRINTABLE.start} to {prob.PRINTABLE.stop - 1}]:")
    for symbol, line in enumerate(lines):
        if symbol in prob.PRINTABLE and line != prob.NO_CODE:
            print(f"{chr(symbol)!r}: {line}")
    print(f"Wrote code listing to {codes_out}")


def encode_file(prob_path, data_path, encoded_path, alphabet_size: int) -> None:
    root = prob.tree_from_probability_file(prob_path, alphabet_size)
    with prob.open_resource(data_path, "rb") as reader, prob.open_resource(encoded_path, "wb") as writer:
        bits = huff.encode_stream(root, reader, writer)
    print(f"Encoded {data_path} into {encoded_path} ({bits} bits)")


def decode_file(prob_path, encoded_path, decoded_path, alphabet_size: int) -> None:
    root = prob.tree_from_probability_file(prob_path, alphabet_size)
    with prob.open_resource(encoded_path, "rb") as reader, prob.open_resource(decoded_path, "wb") as writer:
        n = huff.decode_stream(root, reader, writer)
    print(f"Decoded {encoded_path} into {decoded_path} ({n} bytes)")


def main(argv: Optional[List[str]] = None) -> int:
    ap = build_parser()
    args = ap.parse_args(argv)

    try:
        prob.check_alphabet_size(args.alphabet_size)
    except ValueError as exc:
        ap.error(str(exc))

    try:
        if args.p is not None:
            operation = "probabilities"
            sample, prob_path = args.p
            prob.estimate_probability_file(sample, prob_path, args.alphabet_size)
            print(f"Wrote {args.alphabet_size} probabilities to {prob_path}")
        elif args.s is not None:
            operation = "codes"
            show_codes(args.s, args.codes_out, args.alphabet_size)
        elif args.e is not None:
            operation = "encode"
            encode_file(*args.e, alphabet_size=args.alphabet_size)
        else:
            operation = "decode"
            decode_file(*args.d, alphabet_size=args.alphabet_size)
    except HuffmanError as exc:
        print(f"huffman: error: {operation}: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
