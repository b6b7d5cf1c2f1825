"""
Probability estimation and the text formats around the coder

  - probability file: one "%.8f" value per symbol, symbol order 0..A-1
  - code listing: one line per symbol, its code or "No code"
"""

from __future__ import annotations

import math
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence

import huffman as huff
from huffman_errors import (
    EmptySampleError,
    MalformedProbabilityData,
    ResourceOpenError,
    SymbolNotInAlphabet,
)

ASCII_SIZE = 128 # default alphabet: the 7-bit ASCII set
MAX_ALPHABET_SIZE = 256
PRINTABLE = range(32, 127) # symbols whose codes appear in the listing
NO_CODE = "No code"


def open_resource(path, mode: str = "r", **kwargs):
    try:
        return open(path, mode, **kwargs)
    except OSError as exc:
        raise ResourceOpenError(path, exc.strerror or exc) from exc


def check_alphabet_size(alphabet_size: int) -> int:
    if not 1 <= alphabet_size <= MAX_ALPHABET_SIZE:
        raise ValueError(f"alphabet size must be between 1 and {MAX_ALPHABET_SIZE}, got {alphabet_size}")
    return alphabet_size


# Estimation

def freq_table(data: bytes, alphabet_size: int = ASCII_SIZE) -> List[int]:
    counts = [0] * check_alphabet_size(alphabet_size)
    for b in data:
        if b >= alphabet_size:
            raise SymbolNotInAlphabet(b)
        counts[b] += 1
    return counts


def calculate_probabilities(data: bytes, alphabet_size: int = ASCII_SIZE) -> List[float]:
    counts = freq_table(data, alphabet_size)
    total = len(data)
    if total == 0:
        raise EmptySampleError("input sample is empty")
    return [c / total for c in counts]


def alphabet_frequency_table(probabilities: Sequence[float]) -> Dict[int, float]:
    # symbol i is the byte value i
    return {symbol: p for symbol, p in enumerate(probabilities)}


# Probability file

def write_probabilities(path, probabilities: Iterable[float]) -> None:
    with open_resource(path, "w", encoding="ascii", newline="\n") as f:
        for p in probabilities:
            f.write(f"{p:.8f}\n")


def parse_probabilities(text: str, alphabet_size: int = ASCII_SIZE) -> List[float]:
    """
    First alphabet_size whitespace separated numbers of text
    Anything after them is ignored
    """
    tokens = text.split()
    if len(tokens) < alphabet_size:
        raise MalformedProbabilityData(
            f"expected {alphabet_size} probabilities, found {len(tokens)}"
        )

    probabilities = []
    for index, token in enumerate(tokens[:alphabet_size]):
        try:
            value = float(token)
        except ValueError:
            raise MalformedProbabilityData(f"value {index} is not a number: {token!r}") from None
        if not math.isfinite(value) or value < 0:
            raise MalformedProbabilityData(f"value {index} must be a non-negative finite number, got {token!r}")
        probabilities.append(value)
    return probabilities


def read_probabilities(path, alphabet_size: int = ASCII_SIZE) -> List[float]:
    check_alphabet_size(alphabet_size)
    with open_resource(path, "r", encoding="ascii", errors="replace") as f:
        text = f.read()
    return parse_probabilities(text, alphabet_size)


def estimate_probability_file(sample_path, prob_path, alphabet_size: int = ASCII_SIZE) -> List[float]:
    with open_resource(sample_path, "rb") as f:
        data = f.read()
    probabilities = calculate_probabilities(data, alphabet_size)
    write_probabilities(prob_path, probabilities)
    return probabilities


def tree_from_probability_file(prob_path, alphabet_size: int = ASCII_SIZE) -> huff.HuffmanNode:
    probabilities = read_probabilities(prob_path, alphabet_size)
    return huff.build_huffman_tree(alphabet_frequency_table(probabilities))


# Code listing

def format_code_listing(root: huff.HuffmanNode, alphabet_size: int = ASCII_SIZE,
                        printable: Optional[range] = PRINTABLE) -> List[str]:
    codes = huff.codec_code_map(root)
    lines = []
    for symbol in range(alphabet_size):
        code = codes.get(symbol)
        if code is None or (printable is not None and symbol not in printable):
            lines.append(NO_CODE)
        else:
            lines.append(code)
    return lines


def write_code_listing(path, lines: Iterable[str]) -> Path:
    with open_resource(path, "w", encoding="ascii", newline="\n") as f:
        for line in lines:
            f.write(line + "\n")
    return Path(path)
