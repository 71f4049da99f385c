# qit/report.py
# data/<backend>/*.csv → data/<backend>/*.png
#   python -m qit.report [--data-dir DIR]
import argparse, csv, os
from collections import defaultdict
from statistics import median

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt

from .config import BACKENDS

DATA_DIR = os.path.join(os.path.dirname(__file__), "..", "data")


def load_rows(path):
    rows = []
    with open(path, "r") as f:
        for row in csv.DictReader(f):
            row["qubits"] = int(row["qubits"])
            row["depth"] = int(row["depth"])
            row["threads"] = int(row["threads"])
            row["gates"] = int(row["gates"])
            row["wall_ms"] = float(row["wall_ms"])
            rows.append(row)
    return rows


def median_by_key(rows, key_fields):
    buckets = defaultdict(list)
    for r in rows:
        buckets[tuple(r[k] for k in key_fields)].append(r["wall_ms"])
    agg = []
    for key, vals in buckets.items():
        out = dict(zip(key_fields, key))
        out["wall_ms"] = float(median(vals))
        agg.append(out)
    return agg


def _save(out_dir, name):
    path = os.path.join(out_dir, name)
    plt.savefig(path, dpi=200)
    plt.close()
    return path


def _line_plot(rows, x_field, xlabel, title, out_dir, name, logy=False):
    pts = sorted(median_by_key(rows, [x_field]), key=lambda r: r[x_field])
    if not pts:
        return None
    plt.figure()
    plt.plot([r[x_field] for r in pts], [r["wall_ms"] for r in pts], marker="o")
    plt.xlabel(xlabel)
    plt.ylabel("Runtime (ms)")
    if logy:
        plt.yscale("log")
    plt.title(title)
    plt.grid(True)
    return _save(out_dir, name)


def plot_runtime_vs_qubits(rows, tag, out_dir):
    return _line_plot(rows, "qubits", "Qubits (n)", f"Runtime vs Qubits [{tag}]",
                      out_dir, f"runtime_vs_qubits_{tag}.png")


def plot_runtime_vs_depth(rows, tag, out_dir):
    return _line_plot(rows, "depth", "Depth", f"Runtime vs Depth [{tag}]",
                      out_dir, f"runtime_vs_depth_{tag}.png")


def plot_runtime_vs_threads(rows, tag, out_dir):
    return _line_plot(rows, "threads", "Threads", f"Runtime vs Threads [{tag}]",
                      out_dir, f"runtime_vs_threads_{tag}.png")


def plot_runtime_vs_width(rows, tag, out_dir):
    # arith.csv stores the register width in the qubits column
    return _line_plot(rows, "qubits", "Register width (k)", f"Constant subtraction [{tag}]",
                      out_dir, f"runtime_vs_width_{tag}.png")


def plot_speedup_vs_threads(rows, tag, out_dir):
    pts = sorted(median_by_key(rows, ["threads"]), key=lambda r: r["threads"])
    t1 = next((r["wall_ms"] for r in pts if r["threads"] == 1), None)
    if not t1:
        return None
    plt.figure()
    plt.plot([r["threads"] for r in pts], [t1 / r["wall_ms"] for r in pts], marker="o")
    plt.xlabel("Threads")
    plt.ylabel("Speedup (T1/Tt)")
    plt.title(f"Speedup vs Threads [{tag}]")
    plt.grid(True)
    return _save(out_dir, f"speedup_vs_threads_{tag}.png")


def plot_qubits_compare(data_dir=DATA_DIR):
    """One log-scale line per backend that has a qubits.csv."""
    series = {}
    for be in BACKENDS:
        path = os.path.join(data_dir, be, "qubits.csv")
        if os.path.exists(path):
            pts = sorted(median_by_key(load_rows(path), ["qubits"]), key=lambda r: r["qubits"])
            series[be] = ([r["qubits"] for r in pts], [r["wall_ms"] for r in pts])
    if not series:
        return None

    plt.figure()
    for be, (xs, ys) in series.items():
        plt.plot(xs, ys, marker="o", label=be)
    plt.xlabel("Qubits (n)")
    plt.ylabel("Runtime (ms, log scale)")
    plt.title("Runtime vs Qubits (" + " vs ".join(series) + ")")
    plt.yscale("log")
    plt.grid(True, which="both", ls="--", lw=0.5)
    plt.legend()
    plt.tight_layout()
    return _save(data_dir, "runtime_vs_qubits_compare.png")


def plot_csv(path):
    """Plot one benchmark CSV next to itself; the file name picks the plots."""
    tag = os.path.splitext(os.path.basename(path))[0]
    backend = os.path.basename(os.path.dirname(path))
    out_dir = os.path.dirname(path)
    rows = load_rows(path)
    print(f"Plotting from {backend}/{tag}.csv ({len(rows)} rows)...")

    if tag.startswith("qubits"):
        made = [plot_runtime_vs_qubits(rows, backend, out_dir)]
    elif tag.startswith("threads"):
        made = [plot_speedup_vs_threads(rows, backend, out_dir),
                plot_runtime_vs_threads(rows, backend, out_dir)]
    elif tag.startswith("depth"):
        made = [plot_runtime_vs_depth(rows, backend, out_dir)]
    elif tag.startswith("arith"):
        made = [plot_runtime_vs_width(rows, backend, out_dir)]
    else:
        made = []
    return [p for p in made if p]


def plot_all(data_dir=DATA_DIR):
    csvs = []
    for root, _, files in os.walk(data_dir):
        csvs.extend(os.path.join(root, f) for f in files if f.endswith(".csv"))
    if not csvs:
        print(f"No CSV files found under {data_dir}")
        return []

    made = []
    for path in sorted(csvs):
        try:
            made.extend(plot_csv(path))
        except (KeyError, ValueError) as e:
            print(f"Skipping {path}: {e}")
    compare = plot_qubits_compare(data_dir)
    if compare:
        made.append(compare)
    print(f"\nSaved {len(made)} plots under {data_dir}")
    return made


def main(argv=None):
    p = argparse.ArgumentParser(description="Plot qit benchmark CSVs")
    p.add_argument("--data-dir", type=str, default=DATA_DIR)
    args = p.parse_args(argv)
    plot_all(args.data_dir)


if __name__ == "__main__":
    main()
