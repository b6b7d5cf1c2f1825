import csv

import matplotlib.pyplot as plt
import pytest

import experiments as exp


@pytest.mark.parametrize("name", sorted(exp.GENERATOR_REGISTRY))
def test_generators_stay_inside_alphabet(name):
    data = exp.generate_dataset(name, 2048, 64, seed=5)
    assert len(data) == 2048
    assert max(data) < 64


def test_generators_are_seeded():
    assert exp.generate_dataset("zipf", 512, 128, 1) == exp.generate_dataset("zipf", 512, 128, 1)


def test_unknown_generator():
    with pytest.raises(ValueError, match="unknown generator"):
        exp.generate_dataset("gaussian", 10, 128, 0)


def test_entropy_bits():
    assert exp.entropy_bits([0.5, 0.25, 0.25, 0.0]) == pytest.approx(1.5)


def test_run_one_is_within_one_bit_of_entropy():
    data = exp.generate_dataset("english_like", 8192, 128, seed=2)
    row = exp.run_one(data)
    assert row.correctness_ok == 1
    assert row.entropy_bits <= row.avg_code_length + 1e-9
    assert row.avg_code_length < row.entropy_bits + 1
    assert row.encoded_bits == pytest.approx(row.avg_code_length * len(data))
    assert 0 < row.efficiency <= 1


def test_run_one_single_symbol():
    row = exp.run_one(b"AAAA")
    assert row.correctness_ok == 1
    assert row.encoded_bits == 4
    assert row.unique_symbols == 1


def test_main_writes_csv(tmp_path, capsys):
    code = exp.main([
        "--outdir", str(tmp_path), "--runs", "2", "--size_kb", "1",
        "--min_kb", "1", "--max_kb", "2", "--generators", "zipf,repetitive90", "--no_plots",
    ])
    assert code == 0

    with (tmp_path / "metrics.csv").open() as f:
        rows = list(csv.DictReader(f))
    # 2 generators * 2 runs for exp1, plus 2 generators * 2 sizes * 2 runs for exp2
    assert len(rows) == 12
    assert all(r["correctness_ok"] == "1" for r in rows)

    with (tmp_path / "summary.csv").open() as f:
        summary = list(csv.DictReader(f))
    assert len(summary) == 6
    assert "Correctness rate across all runs: 1.000" in capsys.readouterr().out
    assert not list(tmp_path.glob("*.png"))


def test_main_plots(tmp_path):
    plt.switch_backend("Agg")
    assert exp.main([
        "--outdir", str(tmp_path), "--runs", "1", "--size_kb", "1",
        "--min_kb", "1", "--max_kb", "2", "--generators", "uniform",
    ]) == 0
    assert (tmp_path / "exp1_code_length.png").exists()
    assert (tmp_path / "exp2_codec_time_uniform.png").exists()


def test_main_rejects_unknown_generator(tmp_path):
    with pytest.raises(SystemExit):
        exp.main(["--outdir", str(tmp_path), "--generators", "nope"])
