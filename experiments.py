"""
Coding efficiency experiments for the static Huffman coder

Runs repeated estimate -> build -> encode -> decode cycles on synthetic data
and reports how close the code gets to the entropy of the sample

Outputs (in --outdir):
  - metrics.csv     (raw row per run)
  - summary.csv     (grouped mean/stdev)
  - *.png           (charts, unless --no_plots)

How to run:
  python experiments.py --outdir results --runs 5
  python experiments.py --outdir results --runs 3 --generators zipf,english_like --max_kb 256
"""

from __future__ import annotations

import argparse
import csv
import math
import random
import statistics
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, List, Sequence, Tuple

import matplotlib.pyplot as plt

import huffman as huff
import probability as prob


# Utilities

def now_ns() -> int:
    return time.perf_counter_ns()

def ns_to_ms(ns: int) -> float:
    return ns / 1_000_000.0

def safe_mkdir(p: Path) -> None:
    p.mkdir(parents=True, exist_ok=True)

def entropy_bits(probabilities: Sequence[float]) -> float:
    return -sum(p * math.log2(p) for p in probabilities if p > 0)


# Synthetic dataset generators, every symbol below alphabet

def _sample_cdf(rng: random.Random, cdf: List[float]) -> int:
    r = rng.random()
    lo, hi = 0, len(cdf) - 1
    while lo < hi:
        mid = (lo + hi) // 2
        if r <= cdf[mid]:
            hi = mid
        else:
            lo = mid + 1
    return lo

def _cdf(weights: Sequence[float]) -> List[float]:
    total = sum(weights)
    cdf = []
    acc = 0.0
    for w in weights:
        acc += w / total
        cdf.append(acc)
    cdf[-1] = 1.0
    return cdf

def gen_uniform(size: int, alphabet: int, seed: int = 0) -> bytes:
    rng = random.Random(seed)
    return bytes(rng.randrange(0, alphabet) for _ in range(size))

def gen_repetitive(size: int, alphabet: int, dominant: int = ord('A'), dom_frac: float = 0.90, seed: int = 0) -> bytes:
    rng = random.Random(seed)
    dominant = dominant % alphabet
    other_symbols = [i for i in range(alphabet) if i != dominant] or [dominant]
    out = bytearray()
    for _ in range(size):
        if rng.random() < dom_frac:
            out.append(dominant)
        else:
            out.append(rng.choice(other_symbols))
    return bytes(out)

def gen_zipf_like(size: int, alphabet: int, s: float = 1.2, seed: int = 0) -> bytes:
    rng = random.Random(seed)
    cdf = _cdf([1.0 / ((i + 1) ** s) for i in range(alphabet)])
    return bytes(_sample_cdf(rng, cdf) for _ in range(size))

def gen_english_like(size: int, alphabet: int, seed: int = 0) -> bytes:
    rng = random.Random(seed)
    chars = [ch for ch in " etaoinshrdlcumwfgypbvkjxqETAOINSHRDLCUMWFGYPBVKJXQ\n" if ord(ch) < alphabet]
    if not chars:
        return gen_uniform(size, alphabet, seed)

    weights = []
    for ch in chars:
        if ch == ' ':
            weights.append(13.0)
        elif ch == '\n':
            weights.append(1.5)
        elif ch.lower() in "etaoinshrdlu":
            weights.append(6.0)
        elif ch.lower() in "cmfwgypbvk":
            weights.append(2.5)
        else:
            weights.append(1.2)

    cdf = _cdf(weights)
    return bytes(ord(chars[_sample_cdf(rng, cdf)]) for _ in range(size))

GENERATOR_REGISTRY: Dict[str, Callable[[int, int, int], bytes]] = {
    "uniform": lambda size, alphabet, seed: gen_uniform(size, alphabet, seed=seed),
    "zipf": lambda size, alphabet, seed: gen_zipf_like(size, alphabet, s=1.2, seed=seed),
    "repetitive90": lambda size, alphabet, seed: gen_repetitive(size, alphabet, dom_frac=0.90, seed=seed),
    "repetitive99": lambda size, alphabet, seed: gen_repetitive(size, alphabet, dom_frac=0.99, seed=seed),
    "english_like": lambda size, alphabet, seed: gen_english_like(size, alphabet, seed=seed),
}

def generate_dataset(name: str, size_bytes: int, alphabet: int, seed: int) -> bytes:
    fn = GENERATOR_REGISTRY.get(name)
    if fn is None:
        raise ValueError(f"unknown generator {name!r}, choose from {', '.join(sorted(GENERATOR_REGISTRY))}")
    return fn(size_bytes, alphabet, seed)


# Experiment runner

@dataclass
class MetricRow:
    exp_name: str
    dataset_name: str
    file_size_bytes: int
    run_id: int
    unique_symbols: int

    entropy_bits: float         # per symbol
    avg_code_length: float      # per symbol, weighted by the sample
    efficiency: float           # entropy / avg_code_length

    build_ms: float
    encode_ms: float
    decode_ms: float
    total_ms: float

    encoded_bits: int
    compression_ratio: float    # encoded_bits / (8 * file_size_bytes)
    correctness_ok: int  # 1 or 0


def run_one(data: bytes, alphabet_size: int = prob.ASCII_SIZE) -> MetricRow:
    probabilities = prob.calculate_probabilities(data, alphabet_size)

    # Huffman build
    t0 = now_ns()
    root = huff.build_huffman_tree(prob.alphabet_frequency_table(probabilities))
    code_map = huff.codec_code_map(root)
    t1 = now_ns()
    build_ms = ns_to_ms(t1 - t0)

    # encode
    t2 = now_ns()
    bits = huff.huffman_encode(data, code_map)
    t3 = now_ns()
    encode_ms = ns_to_ms(t3 - t2)

    # decode
    t4 = now_ns()
    decoded = huff.huffman_decode(bits, root)
    t5 = now_ns()
    decode_ms = ns_to_ms(t5 - t4)

    h = entropy_bits(probabilities)
    avg_len = len(bits) / len(data)

    return MetricRow(
        exp_name="",
        dataset_name="",
        file_size_bytes=len(data),
        run_id=0,
        unique_symbols=sum(1 for p in probabilities if p > 0),
        entropy_bits=h,
        avg_code_length=avg_len,
        efficiency=(h / avg_len) if avg_len else 1.0,
        build_ms=build_ms,
        encode_ms=encode_ms,
        decode_ms=decode_ms,
        total_ms=build_ms + encode_ms + decode_ms,
        encoded_bits=len(bits),
        compression_ratio=len(bits) / (8 * len(data)),
        correctness_ok=1 if decoded == data else 0,
    )


def write_csv(path: Path, rows: List[MetricRow]) -> None:
    fields = list(MetricRow.__dataclass_fields__.keys())
    with path.open("w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=fields)
        w.writeheader()
        for r in rows:
            w.writerow({k: getattr(r, k) for k in fields})


def mean_stdev(vals: List[float]) -> Tuple[float, float]:
    if len(vals) == 1:
        return vals[0], 0.0
    return statistics.mean(vals), statistics.stdev(vals)


def group_summary(rows: List[MetricRow], out_path: Path) -> int:
    """
    Group by exp_name, dataset_name, file_size_bytes and compute mean/stdev
    Returns the number of groups written
    """
    key_to: Dict[Tuple[str, str, int], List[MetricRow]] = {}
    for r in rows:
        key = (r.exp_name, r.dataset_name, r.file_size_bytes)
        key_to.setdefault(key, []).append(r)

    measured = ["entropy_bits", "avg_code_length", "efficiency", "compression_ratio",
                "build_ms", "encode_ms", "decode_ms", "total_ms"]
    summary_fields = ["exp_name", "dataset_name", "file_size_bytes", "n_runs"]
    for m in measured:
        summary_fields += [f"{m}_mean", f"{m}_stdev"]
    summary_fields.append("correctness_ok_rate")

    with out_path.open("w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=summary_fields)
        w.writeheader()
        for key, items in sorted(key_to.items()):
            exp_name, dataset_name, size_b = key
            row = {
                "exp_name": exp_name,
                "dataset_name": dataset_name,
                "file_size_bytes": size_b,
                "n_runs": len(items),
                "correctness_ok_rate": sum(x.correctness_ok for x in items) / len(items),
            }
            for m in measured:
                row[f"{m}_mean"], row[f"{m}_stdev"] = mean_stdev([getattr(x, m) for x in items])
            w.writerow(row)
    return len(key_to)


# Plotting

def plot_distribution(rows: List[MetricRow], outdir: Path) -> None:
    exp_rows = [r for r in rows if r.exp_name == "exp1_distribution"]
    if not exp_rows:
        return

    datasets = sorted(set(r.dataset_name for r in exp_rows))

    def mean_for(dataset: str, field: str) -> float:
        vals = [getattr(r, field) for r in exp_rows if r.dataset_name == dataset]
        return statistics.mean(vals) if vals else float("nan")

    x = list(range(len(datasets)))

    plt.figure()
    plt.plot(x, [mean_for(d, "entropy_bits") for d in datasets], marker="o", label="entropy")
    plt.plot(x, [mean_for(d, "avg_code_length") for d in datasets], marker="o", label="huffman")
    plt.xticks(x, datasets, rotation=20, ha="right")
    plt.ylabel("Bits per Symbol")
    plt.title("Experiment 1: Average Code Length vs Entropy")
    plt.legend()
    plt.tight_layout()
    plt.savefig(outdir / "exp1_code_length.png", dpi=200)
    plt.close()

    plt.figure()
    plt.plot(x, [mean_for(d, "compression_ratio") for d in datasets], marker="o")
    plt.xticks(x, datasets, rotation=20, ha="right")
    plt.ylabel("Encoded Bits / Original Bits")
    plt.title("Experiment 1: Compression Ratio by Distribution")
    plt.tight_layout()
    plt.savefig(outdir / "exp1_compression_ratio.png", dpi=200)
    plt.close()


def plot_size_scaling(rows: List[MetricRow], outdir: Path) -> None:
    exp_rows = [r for r in rows if r.exp_name == "exp2_size_scaling"]
    if not exp_rows:
        return

    for dist in sorted(set(r.dataset_name for r in exp_rows)):
        dist_rows = [r for r in exp_rows if r.dataset_name == dist]
        sizes = sorted(set(r.file_size_bytes for r in dist_rows))

        def mean_size(size: int, field: str) -> float:
            vals = [getattr(r, field) for r in dist_rows if r.file_size_bytes == size]
            return statistics.mean(vals) if vals else float("nan")

        plt.figure()
        plt.plot(sizes, [mean_size(s, "encode_ms") for s in sizes], marker="o", label="encode")
        plt.plot(sizes, [mean_size(s, "decode_ms") for s in sizes], marker="o", label="decode")
        plt.xlabel("File Size (bytes)")
        plt.ylabel("Time (ms)")
        plt.title(f"Experiment 2: Codec Time vs Size ({dist})")
        plt.legend()
        plt.tight_layout()
        plt.savefig(outdir / f"exp2_codec_time_{dist}.png", dpi=200)
        plt.close()


# Main

def parse_csv_list(s: str) -> List[str]:
    return [x.strip() for x in s.split(",") if x.strip()]

def main(argv=None) -> int:
    ap = argparse.ArgumentParser()
    ap.add_argument("--outdir", type=str, default="results", help="Output directory for CSV and plots")
    ap.add_argument("--runs", type=int, default=5, help="Repetitions per configuration")
    ap.add_argument("--seed", type=int, default=123, help="Base random seed")
    ap.add_argument("--alphabet_size", type=int, default=prob.ASCII_SIZE, help="Coder alphabet size (1..256)")
    ap.add_argument("--generators", type=str, default="uniform,zipf,repetitive90,english_like",
                    help="Comma-separated dataset generator names")
    ap.add_argument("--size_kb", type=int, default=64, help="Experiment 1 fixed sample size in KB")
    ap.add_argument("--min_kb", type=int, default=4, help="Experiment 2 min size in KB (power-of-two growth)")
    ap.add_argument("--max_kb", type=int, default=512, help="Experiment 2 max size in KB")
    ap.add_argument("--no_plots", action="store_true", help="Only write the CSV files")

    args = ap.parse_args(argv)
    try:
        prob.check_alphabet_size(args.alphabet_size)
        gen_names = parse_csv_list(args.generators)
        for name in gen_names:
            generate_dataset(name, 0, args.alphabet_size, 0)
    except ValueError as exc:
        ap.error(str(exc))

    outdir = Path(args.outdir)
    safe_mkdir(outdir)

    rows: List[MetricRow] = []

    # Experiment 1: distributions (fixed size)
    fixed_size = max(1, args.size_kb) * 1024
    for gen_name in gen_names:
        for run_id in range(1, args.runs + 1):
            data = generate_dataset(gen_name, fixed_size, args.alphabet_size, args.seed + run_id)
            row = run_one(data, args.alphabet_size)
            row.exp_name = "exp1_distribution"
            row.dataset_name = gen_name
            row.run_id = run_id
            rows.append(row)

    # Experiment 2: size scaling (powers of 2)
    sizes: List[int] = []
    s = max(1, args.min_kb) * 1024
    while s <= max(1, args.max_kb) * 1024:
        sizes.append(s)
        s *= 2

    for gen_name in gen_names:
        for size_b in sizes:
            for run_id in range(1, args.runs + 1):
                data = generate_dataset(gen_name, size_b, args.alphabet_size, args.seed + 10_000 + size_b + run_id)
                row = run_one(data, args.alphabet_size)
                row.exp_name = "exp2_size_scaling"
                row.dataset_name = gen_name
                row.run_id = run_id
                rows.append(row)

    metrics_csv = outdir / "metrics.csv"
    summary_csv = outdir / "summary.csv"
    write_csv(metrics_csv, rows)
    group_summary(rows, summary_csv)

    if not args.no_plots:
        plot_distribution(rows, outdir)
        plot_size_scaling(rows, outdir)

    ok_rate = sum(r.correctness_ok for r in rows) / max(1, len(rows))
    print(f"Wrote {len(rows)} rows to {metrics_csv}")
    print(f"Wrote grouped summary to {summary_csv}")
    print(f"Correctness rate across all runs: {ok_rate:.3f}")
    if not args.no_plots:
        print("Charts saved in:", outdir.resolve())
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
