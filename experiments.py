"""
Huffman coding experiments

Runs repeated encode/decode experiments over synthetic text corpora and
records how close the code gets to the entropy bound

Outputs (in --outdir):
  - metrics.csv     (raw row per run per configuration)
  - summary.csv     (grouped mean/stdev)
  - *.png           (charts)

How to run:
  python experiments.py --outdir results --runs 5
  python experiments.py --outdir results --runs 7 --exp1_size_kb 256 --exp2_max_kb 2048
  python experiments.py --outdir results --runs 3 --exp1_generators uniform,zipf,english_like

Notes:
  Encoded size is the length of the bit string; nothing is packed into bytes.
  The uncompressed baseline is 8 bits per character.
"""

from __future__ import annotations

import argparse
import csv
import random
import statistics
import string
import sys
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Tuple, Callable

import matplotlib.pyplot as plt

import huffman as huff


ALPHABET = string.ascii_letters + string.digits + string.punctuation + " "


# Utilities

def now_ns() -> int:
    return time.perf_counter_ns()

def ns_to_ms(ns: int) -> float:
    return ns / 1_000_000.0

def safe_mkdir(p: Path) -> None:
    p.mkdir(parents=True, exist_ok=True)

def _sample_cdf(rng: random.Random, chars: str, weights: List[float], size: int) -> str:
    total = sum(weights)
    cdf = []
    acc = 0.0
    for w in weights:
        acc += w / total
        cdf.append(acc)

    out = []
    for _ in range(size):
        r = rng.random()
        lo, hi = 0, len(cdf) - 1
        while lo < hi:
            mid = (lo + hi) // 2
            if r <= cdf[mid]:
                hi = mid
            else:
                lo = mid + 1
        out.append(chars[lo])
    return "".join(out)


# Synthetic corpus generators

def gen_uniform(size: int, alphabet: int = len(ALPHABET), seed: int = 0) -> str:
    rng = random.Random(seed)
    chars = ALPHABET[:alphabet]
    return "".join(rng.choice(chars) for _ in range(size))

def gen_repetitive(size: int, dominant: str = "A", dom_frac: float = 0.90, seed: int = 0) -> str:
    rng = random.Random(seed)
    others = [c for c in ALPHABET if c != dominant]
    return "".join(dominant if rng.random() < dom_frac else rng.choice(others) for _ in range(size))

def gen_zipf_like(size: int, alphabet: int = 64, s: float = 1.2, seed: int = 0) -> str:
    rng = random.Random(seed)
    weights = [1.0 / ((i + 1) ** s) for i in range(alphabet)]
    return _sample_cdf(rng, ALPHABET[:alphabet], weights, size)

def gen_english_like(size: int, seed: int = 0) -> str:
    rng = random.Random(seed)
    chars = (
        " etaoinshrdlcumwfgypbvkjxq"
        "ETAOINSHRDLCUMWFGYPBVKJXQ"
        "\n"
    )
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
    return _sample_cdf(rng, chars, weights, size)

def gen_single_symbol(size: int, seed: int = 0) -> str:
    return "A" * size

GENERATOR_REGISTRY: Dict[str, Callable[[int, int], str]] = {
    "uniform": lambda size, seed: gen_uniform(size, seed=seed),
    "uniform16": lambda size, seed: gen_uniform(size, alphabet=16, seed=seed),
    "zipf": lambda size, seed: gen_zipf_like(size, alphabet=64, s=1.2, seed=seed),
    "repetitive90": lambda size, seed: gen_repetitive(size, dom_frac=0.90, seed=seed),
    "repetitive99": lambda size, seed: gen_repetitive(size, dom_frac=0.99, seed=seed),
    "english_like": lambda size, seed: gen_english_like(size, seed=seed),
    "single_symbol": lambda size, seed: gen_single_symbol(size, seed=seed),
}

def generate_dataset(name: str, size_chars: int, seed: int) -> Tuple[str, str]:
    """
    Unknown generator names fall back to uniform, and the returned dataset
    name records the fallback
    """
    fn = GENERATOR_REGISTRY.get(name)
    if fn is None:
        return f"{name}_fallback_uniform", gen_uniform(size_chars, seed=seed)
    return name, fn(size_chars, seed)


# Experiment runner

@dataclass
class MetricRow:
    exp_name: str
    dataset_name: str
    size_chars: int
    run_id: int
    unique_symbols: int

    build_ms: float
    encode_ms: float
    decode_ms: float
    total_ms: float

    encoded_bits: int
    compression_ratio: float  # encoded bits / (8 * chars)
    avg_code_length: float
    entropy: float
    efficiency: float  # entropy / avg code length
    max_code_length: int
    correctness_ok: int  # 1 or 0


def run_one(text: str) -> MetricRow:
    ft = huff.count_frequencies(text)

    t0 = now_ns()
    root = huff.build_tree(ft)
    codes = huff.derive_codes(root)
    t1 = now_ns()

    encoded = huff.encode(text, codes)
    t2 = now_ns()

    decoded = huff.decompress_text(encoded, root)
    t3 = now_ns()

    build_ms = ns_to_ms(t1 - t0)
    encode_ms = ns_to_ms(t2 - t1)
    decode_ms = ns_to_ms(t3 - t2)

    avg_len = huff.average_code_length(codes, ft)
    h = huff.entropy(ft)

    return MetricRow(
        exp_name="",
        dataset_name="",
        size_chars=len(text),
        run_id=0,
        unique_symbols=len(ft),
        build_ms=build_ms,
        encode_ms=encode_ms,
        decode_ms=decode_ms,
        total_ms=build_ms + encode_ms + decode_ms,
        encoded_bits=len(encoded),
        compression_ratio=len(encoded) / max(1, 8 * len(text)),
        avg_code_length=avg_len,
        entropy=h,
        efficiency=(h / avg_len) if avg_len else 0.0,
        max_code_length=max(len(c) for c in codes.values()),
        correctness_ok=1 if decoded == text else 0,
    )


def write_csv(path: Path, rows: List[MetricRow]) -> None:
    fields = list(MetricRow.__dataclass_fields__.keys())
    with path.open("w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=fields)
        w.writeheader()
        for r in rows:
            w.writerow({k: getattr(r, k) for k in fields})


SUMMARY_METRICS = ("compression_ratio", "avg_code_length", "entropy", "efficiency",
                   "build_ms", "encode_ms", "decode_ms", "total_ms")


def mean_stdev(vals: List[float]) -> Tuple[float, float]:
    if len(vals) == 1:
        return vals[0], 0.0
    return statistics.mean(vals), statistics.stdev(vals)


def group_summary(rows: List[MetricRow], out_path: Path) -> None:
    """
    Group by exp_name, dataset_name, size_chars and compute mean/stdev
    """
    key_to: Dict[Tuple[str, str, int], List[MetricRow]] = {}
    for r in rows:
        key = (r.exp_name, r.dataset_name, r.size_chars)
        key_to.setdefault(key, []).append(r)

    summary_fields = ["exp_name", "dataset_name", "size_chars", "n_runs"]
    for m in SUMMARY_METRICS:
        summary_fields += [f"{m}_mean", f"{m}_stdev"]
    summary_fields.append("correctness_ok_rate")

    with out_path.open("w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=summary_fields)
        w.writeheader()
        for key, items in sorted(key_to.items()):
            exp_name, dataset_name, size_c = key
            row = {
                "exp_name": exp_name,
                "dataset_name": dataset_name,
                "size_chars": size_c,
                "n_runs": len(items),
            }
            for m in SUMMARY_METRICS:
                row[f"{m}_mean"], row[f"{m}_stdev"] = mean_stdev([getattr(x, m) for x in items])
            row["correctness_ok_rate"] = sum(x.correctness_ok for x in items) / len(items)
            w.writerow(row)


# Plotting

def plot_experiment_1(rows: List[MetricRow], outdir: Path) -> None:
    exp_rows = [r for r in rows if r.exp_name == "exp1_distribution"]
    if not exp_rows:
        return

    datasets = sorted(set(r.dataset_name for r in exp_rows))

    def mean_for(dataset: str, field: str) -> float:
        vals = [getattr(r, field) for r in exp_rows if r.dataset_name == dataset]
        return statistics.mean(vals) if vals else float("nan")

    x = list(range(len(datasets)))

    plt.figure()
    plt.plot(x, [mean_for(d, "avg_code_length") for d in datasets], marker="o", label="huffman")
    plt.plot(x, [mean_for(d, "entropy") for d in datasets], marker="o", label="entropy")
    plt.xticks(x, datasets, rotation=20, ha="right")
    plt.ylabel("Bits per Symbol")
    plt.title("Experiment 1: Code Length vs Entropy by Distribution")
    plt.legend()
    plt.tight_layout()
    plt.savefig(outdir / "exp1_code_length.png", dpi=200)
    plt.close()

    plt.figure()
    plt.plot(x, [mean_for(d, "compression_ratio") for d in datasets], marker="o")
    plt.xticks(x, datasets, rotation=20, ha="right")
    plt.ylabel("Encoded Bits / (8 * Characters)")
    plt.title("Experiment 1: Compression Ratio by Distribution")
    plt.tight_layout()
    plt.savefig(outdir / "exp1_compression_ratio.png", dpi=200)
    plt.close()

    plt.figure()
    for field, label in (("build_ms", "build"), ("encode_ms", "encode"), ("decode_ms", "decode")):
        plt.plot(x, [mean_for(d, field) for d in datasets], marker="o", label=label)
    plt.xticks(x, datasets, rotation=20, ha="right")
    plt.ylabel("Time (ms)")
    plt.title("Experiment 1: Runtime by Distribution")
    plt.legend()
    plt.tight_layout()
    plt.savefig(outdir / "exp1_time.png", dpi=200)
    plt.close()


def plot_experiment_2(rows: List[MetricRow], outdir: Path) -> None:
    exp_rows = [r for r in rows if r.exp_name == "exp2_size_scaling"]
    if not exp_rows:
        return

    for dist in sorted(set(r.dataset_name for r in exp_rows)):
        dist_rows = [r for r in exp_rows if r.dataset_name == dist]
        sizes = sorted(set(r.size_chars for r in dist_rows))

        def mean_size(size: int, field: str) -> float:
            vals = [getattr(r, field) for r in dist_rows if r.size_chars == size]
            return statistics.mean(vals) if vals else float("nan")

        plt.figure()
        for field, label in (("encode_ms", "encode"), ("decode_ms", "decode"), ("total_ms", "total")):
            plt.plot(sizes, [mean_size(s, field) for s in sizes], marker="o", label=label)
        plt.xlabel("Input Size (characters)")
        plt.ylabel("Time (ms)")
        plt.title(f"Experiment 2: Runtime vs Size ({dist})")
        plt.legend()
        plt.tight_layout()
        plt.savefig(outdir / f"exp2_time_{dist}.png", dpi=200)
        plt.close()


def plot_experiment_3(rows: List[MetricRow], outdir: Path) -> None:
    exp_rows = [r for r in rows if r.exp_name == "exp3_alphabet_size"]
    if not exp_rows:
        return

    alphabets = sorted(set(r.unique_symbols for r in exp_rows))

    def mean_for(n: int, field: str) -> float:
        vals = [getattr(r, field) for r in exp_rows if r.unique_symbols == n]
        return statistics.mean(vals) if vals else float("nan")

    plt.figure()
    plt.plot(alphabets, [mean_for(n, "avg_code_length") for n in alphabets], marker="o", label="huffman")
    plt.plot(alphabets, [mean_for(n, "max_code_length") for n in alphabets], marker="o", label="longest code")
    plt.xlabel("Distinct Symbols")
    plt.ylabel("Bits")
    plt.title("Experiment 3: Code Length vs Alphabet Size (uniform)")
    plt.legend()
    plt.tight_layout()
    plt.savefig(outdir / "exp3_code_length.png", dpi=200)
    plt.close()


# Main

def parse_csv_list(s: str) -> List[str]:
    return [x.strip() for x in s.split(",") if x.strip()]

def main(argv: List[str] = None) -> int:
    ap = argparse.ArgumentParser()
    ap.add_argument("--outdir", type=str, default="results", help="Output directory for CSV and plots")
    ap.add_argument("--runs", type=int, default=5, help="Repetitions per configuration (>=3 recommended for timing)")
    ap.add_argument("--seed", type=int, default=123, help="Base random seed")

    # Experiment toggles
    ap.add_argument("--no_exp1", action="store_true", help="Disable experiment 1 (distribution)")
    ap.add_argument("--no_exp2", action="store_true", help="Disable experiment 2 (size scaling)")
    ap.add_argument("--no_exp3", action="store_true", help="Disable experiment 3 (alphabet size)")

    # Experiment 1 controls
    ap.add_argument("--exp1_size_kb", type=int, default=64, help="Experiment 1 fixed corpus size in K characters")
    ap.add_argument("--exp1_generators", type=str, default="uniform,zipf,repetitive90,english_like",
                    help="Comma-separated generator names for experiment 1")

    # Experiment 2 controls
    ap.add_argument("--exp2_min_kb", type=int, default=4, help="Experiment 2 min size in K characters (power-of-two growth)")
    ap.add_argument("--exp2_max_kb", type=int, default=512, help="Experiment 2 max size in K characters")
    ap.add_argument("--exp2_generators", type=str, default="uniform,english_like",
                    help="Comma-separated generator names for experiment 2")

    # Experiment 3 controls
    ap.add_argument("--exp3_size_kb", type=int, default=16, help="Experiment 3 corpus size in K characters")

    args = ap.parse_args(argv)

    outdir = Path(args.outdir)
    safe_mkdir(outdir)

    rows: List[MetricRow] = []

    def record(exp_name: str, dataset_name: str, text: str, run_id: int) -> None:
        row = run_one(text)
        row.exp_name = exp_name
        row.dataset_name = dataset_name
        row.run_id = run_id
        rows.append(row)

    try:
        # Experiment 1: distributions (fixed size)
        if not args.no_exp1:
            fixed_size = max(1, args.exp1_size_kb) * 1024
            for gen_name in parse_csv_list(args.exp1_generators):
                for run_id in range(1, args.runs + 1):
                    dataset_name, text = generate_dataset(gen_name, fixed_size, args.seed + run_id)
                    record("exp1_distribution", dataset_name, text, run_id)

        # Experiment 2: size scaling (powers of 2)
        if not args.no_exp2:
            sizes: List[int] = []
            s = max(1, args.exp2_min_kb) * 1024
            while s <= max(1, args.exp2_max_kb) * 1024:
                sizes.append(s)
                s *= 2

            for gen_name in parse_csv_list(args.exp2_generators):
                for size_c in sizes:
                    for run_id in range(1, args.runs + 1):
                        dataset_name, text = generate_dataset(gen_name, size_c, args.seed + 10_000 + size_c + run_id)
                        record("exp2_size_scaling", dataset_name, text, run_id)

        # Experiment 3: uniform corpora over growing alphabets
        if not args.no_exp3:
            size_c = max(1, args.exp3_size_kb) * 1024
            for alphabet in (2, 3, 4, 8, 16, 32, 64, len(ALPHABET)):
                for run_id in range(1, args.runs + 1):
                    text = gen_uniform(size_c, alphabet=alphabet, seed=args.seed + 200_000 + run_id)
                    record("exp3_alphabet_size", f"uniform{alphabet}", text, run_id)
    except huff.HuffmanError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    # Write raw and summary
    metrics_csv = outdir / "metrics.csv"
    summary_csv = outdir / "summary.csv"
    write_csv(metrics_csv, rows)
    group_summary(rows, summary_csv)

    # Plots
    plot_experiment_1(rows, outdir)
    plot_experiment_2(rows, outdir)
    plot_experiment_3(rows, outdir)

    ok_rate = sum(r.correctness_ok for r in rows) / max(1, len(rows))
    print(f"Wrote {len(rows)} rows to {metrics_csv}")
    print(f"Wrote grouped summary to {summary_csv}")
    print(f"Correctness rate across all runs: {ok_rate:.3f}")
    print("Charts saved in:", outdir.resolve())
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
