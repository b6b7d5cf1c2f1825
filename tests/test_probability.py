import pytest

import huffman as huff
import probability as prob
from huffman_errors import (
    EmptySampleError,
    MalformedProbabilityData,
    ResourceOpenError,
    SymbolNotInAlphabet,
)


def test_freq_table_counts_each_byte():
    counts = prob.freq_table(b"abracadabra")
    assert len(counts) == prob.ASCII_SIZE
    assert counts[ord("a")] == 5
    assert counts[ord("b")] == 2
    assert sum(counts) == 11


def test_freq_table_rejects_bytes_outside_alphabet():
    with pytest.raises(SymbolNotInAlphabet):
        prob.freq_table(b"ok\xc3\xa9")
    assert prob.freq_table(b"\xc3", alphabet_size=256)[0xC3] == 1


def test_calculate_probabilities():
    probabilities = prob.calculate_probabilities(b"aab")
    assert probabilities[ord("a")] == pytest.approx(2 / 3)
    assert probabilities[ord("b")] == pytest.approx(1 / 3)
    assert sum(probabilities) == pytest.approx(1.0)


def test_empty_sample_raises():
    with pytest.raises(EmptySampleError):
        prob.calculate_probabilities(b"")


@pytest.mark.parametrize("size", [0, 257])
def test_alphabet_size_bounds(size):
    with pytest.raises(ValueError):
        prob.check_alphabet_size(size)


def test_probability_file_round_trip(tmp_path):
    path = tmp_path / "prob.txt"
    probabilities = prob.calculate_probabilities(b"hello world\n")
    prob.write_probabilities(path, probabilities)

    lines = path.read_text().splitlines()
    assert len(lines) == prob.ASCII_SIZE
    assert lines[ord("l")] == "0.25000000"
    assert prob.read_probabilities(path) == pytest.approx(probabilities, abs=1e-8)


def test_extra_values_are_ignored():
    text = "\n".join(["0.5"] * 130)
    assert len(prob.parse_probabilities(text)) == prob.ASCII_SIZE


def test_short_probability_file(tmp_path):
    path = tmp_path / "prob.txt"
    path.write_text("0.5\n0.5\n")
    with pytest.raises(MalformedProbabilityData, match="expected 128"):
        prob.read_probabilities(path)


@pytest.mark.parametrize("bad", ["abc", "-0.1", "nan", "inf"])
def test_bad_probability_values(bad):
    values = ["0.0"] * prob.ASCII_SIZE
    values[3] = bad
    with pytest.raises(MalformedProbabilityData):
        prob.parse_probabilities("\n".join(values))


def test_missing_file_raises_resource_open_error(tmp_path):
    missing = tmp_path / "nope.txt"
    with pytest.raises(ResourceOpenError) as excinfo:
        prob.read_probabilities(missing)
    assert isinstance(excinfo.value, OSError)
    assert str(missing) in str(excinfo.value)


def test_estimate_probability_file(tmp_path):
    sample = tmp_path / "sample.txt"
    sample.write_bytes(b"x")
    out = tmp_path / "prob.txt"
    prob.estimate_probability_file(sample, out)

    probabilities = prob.read_probabilities(out)
    assert probabilities[ord("x")] == 1.0
    assert sum(probabilities) == 1.0


def test_code_listing_marks_unprintable_symbols():
    probabilities = prob.calculate_probabilities(bytes(range(128)))
    root = huff.build_huffman_tree(prob.alphabet_frequency_table(probabilities))
    lines = prob.format_code_listing(root)

    assert len(lines) == 128
    assert all(line == prob.NO_CODE for line in lines[:32])
    assert lines[127] == prob.NO_CODE
    # equal weights over 128 symbols give a complete tree of depth 7
    assert all(len(line) == 7 and set(line) <= {"0", "1"} for line in lines[32:127])


def test_code_listing_symbol_missing_from_tree(tmp_path):
    root = huff.build_huffman_tree({65: 1.0, 66: 1.0})
    lines = prob.format_code_listing(root)
    assert lines[65] == "0"
    assert lines[66] == "1"
    assert lines.count(prob.NO_CODE) == 126

    path = prob.write_code_listing(tmp_path / "codes.txt", lines)
    assert path.read_text().splitlines() == lines


def test_tree_from_probability_file(tmp_path):
    path = tmp_path / "prob.txt"
    probabilities = [0.0] * 128
    probabilities[ord("a")] = 0.5
    probabilities[ord("b")] = 0.25
    probabilities[ord("c")] = 0.25
    prob.write_probabilities(path, probabilities)

    root = prob.tree_from_probability_file(path)
    codes = huff.generate_huffman_codes(root)
    assert len(codes) == 128
    assert codes[ord("a")] == "0"
    # the zero-weight symbols share a subtree that pushes one of b/c a level down
    assert huff.weighted_path_length(root) == pytest.approx(1.75)


def test_unwritable_output_raises_resource_open_error(tmp_path):
    with pytest.raises(ResourceOpenError):
        prob.write_probabilities(tmp_path, [0.5, 0.5])
    with pytest.raises(ResourceOpenError):
        prob.write_code_listing(tmp_path, ["0", "1"])
