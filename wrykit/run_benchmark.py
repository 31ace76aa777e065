"""Run the benchmark binaries and record timing, size, memory and syscall figures."""

from __future__ import annotations

import argparse
import json
import os
import platform
import subprocess
import sys
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Sequence

from .bench_utils import (
    BenchResult,
    bench_root_path,
    get_target,
    parse_max_mem,
    parse_strace_output,
    read_json,
    run,
    run_collect,
    target_dir,
    write_json,
    wry_root_path,
)

TARGETS: tuple[tuple[str, tuple[str, ...]], ...] = (
    (
        "Windows",
        (
            "x86_64-pc-windows-gnu",
            "i686-pc-windows-gnu",
            "i686-pc-windows-msvc",
            "x86_64-pc-windows-msvc",
        ),
    ),
    (
        "Linux",
        (
            "x86_64-unknown-linux-gnu",
            "i686-unknown-linux-gnu",
            "aarch64-unknown-linux-gnu",
        ),
    ),
    ("macOS", ("x86_64-apple-darwin", "aarch64-apple-darwin")),
)

RESULT_KEYS = ("mean", "stddev", "user", "system", "min", "max")

_BENCHMARKS = (
    ("wry_hello_world", "bench_hello_world"),
    ("wry_custom_protocol", "bench_custom_protocol"),
    ("wry_cpu_intensive", "bench_cpu_intensive"),
)


def get_all_benchmarks() -> list[tuple[str, str]]:
    """Return (benchmark name, binary path relative to the bench root) pairs."""
    target = get_target()
    return [(name, f"tests/target/{target}/release/{binary}") for name, binary in _BENCHMARKS]


def run_strace_benchmarks(new_data: BenchResult) -> None:
    """Fill the thread and syscall counts of ``new_data`` by running each binary under strace."""
    thread_count: dict[str, int] = {}
    syscall_count: dict[str, int] = {}

    for name, example_exe in get_all_benchmarks():
        with tempfile.TemporaryDirectory() as tmp:
            out_file = Path(tmp) / "strace.txt"
            subprocess.run(
                ["strace", "-c", "-f", "-o", str(out_file), str(bench_root_path() / example_exe)]
            )
            output = out_file.read_text()

        summary = parse_strace_output(output)
        if "total" not in summary:
            raise RuntimeError(f"strace produced no summary for {name}")
        clone = summary["clone"].calls if "clone" in summary else 0
        thread_count[name] = clone + 1
        syscall_count[name] = summary["total"].calls

    new_data.thread_count = thread_count
    new_data.syscall_count = syscall_count


def run_max_mem_benchmark() -> dict[str, int]:
    """Return the peak memory in bytes of each benchmark, measured with mprof."""
    results: dict[str, int] = {}
    for name, example_exe in get_all_benchmarks():
        benchmark_file = target_dir() / f"mprof{name}_.dat"
        proc = subprocess.run(
            ["mprof", "run", "-C", "-o", str(benchmark_file), str(bench_root_path() / example_exe)],
            stdout=subprocess.DEVNULL,
            stderr=subprocess.PIPE,
        )
        print(proc)
        peak = parse_max_mem(benchmark_file)
        if peak is None:
            raise RuntimeError(f"mprof recorded no memory samples for {name}")
        results[name] = peak
    return results


def rlib_size(target_dir: str | os.PathLike[str], prefix: str) -> int:
    """Sum the sizes of the ``prefix*.rlib`` files in ``target_dir/deps``, one per crate."""
    size = 0
    seen: set[str] = set()
    print(target_dir)

    for entry in sorted(Path(target_dir, "deps").iterdir()):
        name = entry.name
        if not (name.startswith(prefix) and name.endswith(".rlib")):
            continue
        start = name.split("-")[0]
        if start in seen:
            print(f"skip {name}")
        else:
            seen.add(start)
            size += entry.stat().st_size
            print(f"check size {name} {size}")

    if size <= 0:
        raise ValueError(f"no {prefix} rlib found in {Path(target_dir, 'deps')}")
    return size


def get_binary_sizes(target_dir: str | os.PathLike[str]) -> dict[str, int]:
    """Return the sizes of the wry and tao libraries and of every benchmark binary."""
    sizes: dict[str, int] = {}

    wry_size = rlib_size(target_dir, "libwry")
    print(f"wry {wry_size} bytes")
    sizes["wry_rlib"] = wry_size

    tao_size = rlib_size(target_dir, "libtao")
    print(f"tao {tao_size} bytes")
    sizes["tao_rlib"] = tao_size

    for name, example_exe in get_all_benchmarks():
        sizes[name] = os.stat(example_exe).st_size
    return sizes


def count_tree_dependencies(output: str) -> int:
    """Count the distinct crates in ``cargo tree`` output, leaving out the root crate."""
    return len(set(output.splitlines())) - 1


def cargo_deps() -> dict[str, int]:
    """Return, for each OS, the highest dependency count among its targets."""
    results: dict[str, int] = {}
    for os_name, targets in TARGETS:
        for target in targets:
            proc = subprocess.run(
                [
                    "cargo", "tree", "--no-dedupe",
                    "--edges", "normal",
                    "--prefix", "none",
                    "--target", target,
                ],
                cwd=wry_root_path(),
                stdout=subprocess.PIPE,
            )
            count = count_tree_dependencies(proc.stdout.decode("utf-8"))
            results[os_name] = max(count, results.get(os_name, 0))
            if count <= 10:
                raise RuntimeError(f"implausible dependency count {count} for {target}")
    return results


def extract_exec_times(
    hyperfine_results: Any, names: Sequence[str]
) -> dict[str, dict[str, float]]:
    """Pair benchmark names with hyperfine's results, keeping only the summary figures."""
    results: dict[str, dict[str, float]] = {}
    for name, data in zip(names, hyperfine_results["results"]):
        results[name] = {key: float(value) for key, value in data.items() if key in RESULT_KEYS}
    return results


def run_exec_time(target_dir: str | os.PathLike[str]) -> dict[str, dict[str, float]]:
    """Time every benchmark with hyperfine and return its summary figures."""
    benchmark_file = str(Path(target_dir) / "hyperfine_results.json")
    benchmarks = get_all_benchmarks()
    command = ["hyperfine", "--export-json", benchmark_file, "--warmup", "3"]
    command.extend(str(bench_root_path() / exe) for _, exe in benchmarks)
    run(command)
    return extract_exec_times(read_json(benchmark_file), [name for name, _ in benchmarks])


def main(argv: Sequence[str] | None = None) -> int:
    argparse.ArgumentParser(description="Run the wry benchmarks.").parse_args(argv)
    print("Starting wry benchmark")

    out_dir = target_dir()
    os.chdir(bench_root_path())

    now = datetime.now(timezone.utc)
    new_data = BenchResult(
        created_at=f"{now:%Y-%m-%d %H:%M:%S.%f} +00:00:00",
        sha1=run_collect(["git", "rev-parse", "HEAD"])[0].strip(),
        exec_time=run_exec_time(out_dir),
        binary_size=get_binary_sizes(out_dir),
        cargo_deps=cargo_deps(),
    )

    if platform.system() == "Linux":
        run_strace_benchmarks(new_data)
        new_data.max_memory = run_max_mem_benchmark()

    print("===== <BENCHMARK RESULTS>")
    print(json.dumps(new_data.to_dict(), indent=2))
    print("===== </BENCHMARK RESULTS>")

    write_json(out_dir / "bench.json", new_data.to_dict())
    return 0


if __name__ == "__main__":
    sys.exit(main())