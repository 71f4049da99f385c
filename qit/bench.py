# qit/bench.py
# Benchmarks → data/<backend>/*.csv
#   python -m qit.bench qubits --ns 8,12,16 --backend numpy
#   python -m qit.bench threads --n 16 --threads 1,2,4,8
#   python -m qit.bench depth --n 12 --depths 10,50,100
#   python -m qit.bench arith --widths 4,6,8 --backend numpy
import argparse, csv, os, platform, socket, subprocess, time
from datetime import datetime

import numpy as np

from .arithmetic import sub_const
from .backend import load_backend, set_threads
from .circuit import Circuit
from .config import BACKENDS, get_settings
from .state import Qubits

DATA_DIR = os.path.join(os.path.dirname(__file__), "..", "data")

HEADER = ["qubits", "depth", "backend", "threads", "gates", "wall_ms", "hostname", "commit", "dtype", "timestamp"]


def backend_dir(backend, data_dir=DATA_DIR):
    path = os.path.join(data_dir, backend)
    os.makedirs(path, exist_ok=True)
    return path


def meta_row():
    commit = ""
    try:
        commit = subprocess.check_output(["git", "rev-parse", "--short", "HEAD"],
                                         stderr=subprocess.DEVNULL).decode().strip()
    except (OSError, subprocess.CalledProcessError):
        pass
    return {
        "hostname": socket.gethostname(),
        "commit": commit,
        "dtype": get_settings().dtype,
        "timestamp": datetime.now().isoformat(timespec="seconds"),
        "python": platform.python_version(),
        "machine": platform.machine(),
    }


def new_csv(path):
    """Create/overwrite CSV with header."""
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    with open(path, "w", newline="") as f:
        csv.DictWriter(f, fieldnames=HEADER).writeheader()


def write_row(path, row):
    with open(path, "a", newline="") as f:
        csv.DictWriter(f, fieldnames=HEADER, extrasaction="ignore").writerow(row)


def _row(n, depth, backend, threads, gates, wall):
    row = {"qubits": n, "depth": depth, "backend": backend, "threads": threads,
           "gates": gates, "wall_ms": f"{wall:.3f}"}
    row.update(meta_row())
    return row

# ---------------------------------------------------------------------

def random_circuit(n, depth, seed=0):
    """Alternating layers: H/X/RZ on every qubit, then CX on neighbour pairs."""
    rng = np.random.default_rng(seed)
    c = Circuit.empty(n, label=f"random_{n}x{depth}")
    for layer in range(depth):
        if layer % 2 == 0:
            for k in range(n):
                g = rng.integers(0, 3)
                if g == 0:
                    c.h(k)
                elif g == 1:
                    c.x(k)
                else:
                    c.rz(k, float(rng.uniform(0, 2 * np.pi)))
        else:
            for k in range(0, n - 1, 2):
                if rng.integers(0, 2) == 0:
                    c.cx(k, k + 1)
                else:
                    c.cx(k + 1, k)
    return c


def time_run(circ, backend, threads=None):
    t0 = time.perf_counter()
    circ.run(backend=backend, num_threads=threads, check_norm=False)
    return (time.perf_counter() - t0) * 1e3  # ms


def warmup(circ, backend):
    # one dummy run to JIT-compile & warm caches
    circ.run(backend=backend, check_norm=False)


def numba_max_threads():
    try:
        from numba import config
    except ImportError:
        return os.cpu_count() or 1
    return config.NUMBA_NUM_THREADS


def _threads(backend):
    return numba_max_threads() if backend == "numba" else 0

# ---------------------------------------------------------------------
# individual experiments

def bench_qubits(ns, depth, backend, out_path):
    print(f"[run] Qubits scaling → {out_path}")
    new_csv(out_path)
    warmup(random_circuit(min(ns), depth, seed=42), backend)
    for n in ns:
        circ = random_circuit(n, depth, seed=42)
        wall = time_run(circ, backend)
        write_row(out_path, _row(n, depth, backend, _threads(backend), len(circ), wall))
        print(f"  n={n}  wall={wall:.2f} ms")
    print("done.\n")


def bench_threads(n, depth, threads_list, out_path):
    print(f"[run] Thread scaling → {out_path}")
    new_csv(out_path)
    circ = random_circuit(n, depth, seed=123)
    warmup(circ, "numba")
    set_threads(1)
    t1 = time_run(circ, "numba", threads=1)
    pool = numba_max_threads()
    print(f"  pool={pool}  T1={t1:.1f} ms")

    for t in threads_list:
        tt = min(int(t), pool)
        if tt != t:
            print(f"  requested t={t} > pool={pool}; using t={tt}")
        wall = time_run(circ, "numba", threads=tt)
        speedup = t1 / wall if wall > 0 else float("nan")
        write_row(out_path, _row(n, depth, "numba", tt, len(circ), wall))
        print(f"  t={tt}  wall={wall:.2f} ms  speedup={speedup:.2f}x")
    print("done.\n")


def bench_depth(n, depths, backend, out_path):
    print(f"[run] Depth scaling → {out_path}")
    new_csv(out_path)
    warmup(random_circuit(n, min(depths), seed=7), backend)
    for d in depths:
        circ = random_circuit(n, d, seed=7)
        wall = time_run(circ, backend)
        write_row(out_path, _row(n, d, backend, _threads(backend), len(circ), wall))
        print(f"  depth={d}  wall={wall:.2f} ms")
    print("done.\n")


def bench_arith(widths, backend, out_path):
    """Time sub_const(2^k - 1) on a k-qubit register (the longest ripple)."""
    print(f"[run] Constant subtraction → {out_path}")
    new_csv(out_path)
    load_backend(backend)
    for k in widths:
        u = sub_const(list(range(k)), (1 << k) - 1)
        st = Qubits.zeros(k)
        t0 = time.perf_counter()
        u.apply(st, backend=backend)
        wall = (time.perf_counter() - t0) * 1e3
        write_row(out_path, _row(k, 1, backend, _threads(backend), u.gate_count(), wall))
        print(f"  k={k}  gates={u.gate_count()}  wall={wall:.2f} ms")
    print("done.\n")

# ---------------------------------------------------------------------

def _ints(s):
    return [int(x) for x in s.split(",")]


def build_parser():
    p = argparse.ArgumentParser(description="qit benchmarks → data/<backend>/*.csv")
    p.add_argument("--data-dir", type=str, default=DATA_DIR)
    sub = p.add_subparsers(dest="cmd", required=True)

    p_qubits = sub.add_parser("qubits")
    p_qubits.add_argument("--ns", type=_ints, required=True)
    p_qubits.add_argument("--depth", type=int, default=100)
    p_qubits.add_argument("--backend", type=str, default="numpy", choices=BACKENDS)

    p_threads = sub.add_parser("threads")
    p_threads.add_argument("--n", type=int, default=16)
    p_threads.add_argument("--depth", type=int, default=200)
    p_threads.add_argument("--threads", type=_ints, default=[1, 2, 4, 8, 16])
    # threads always use numba backend
    p_threads.add_argument("--backend", type=str, default="numba", choices=["numba"])

    p_depth = sub.add_parser("depth")
    p_depth.add_argument("--n", type=int, default=12)
    p_depth.add_argument("--depths", type=_ints, default=[10, 50, 100, 300, 600])
    p_depth.add_argument("--backend", type=str, default="numpy", choices=BACKENDS)

    p_arith = sub.add_parser("arith")
    p_arith.add_argument("--widths", type=_ints, default=[4, 6, 8, 10, 12])
    p_arith.add_argument("--backend", type=str, default="numpy", choices=BACKENDS)
    return p


def main(argv=None):
    args = build_parser().parse_args(argv)
    base = backend_dir(args.backend, args.data_dir)

    if args.cmd == "qubits":
        bench_qubits(args.ns, args.depth, args.backend, os.path.join(base, "qubits.csv"))
    elif args.cmd == "threads":
        bench_threads(args.n, args.depth, args.threads, os.path.join(base, "threads.csv"))
    elif args.cmd == "depth":
        bench_depth(args.n, args.depths, args.backend, os.path.join(base, "depth.csv"))
    elif args.cmd == "arith":
        bench_arith(args.widths, args.backend, os.path.join(base, "arith.csv"))


if __name__ == "__main__":
    main()
