"""Helpers shared by the benchmark tools: result records, parsers and process runners."""

from __future__ import annotations

import json
import os
import platform
import subprocess
import sys
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Sequence

BENCH_ROOT_ENV = "WRY_BENCH_ROOT"

_TARGETS = {
    "Darwin": "x86_64-apple-darwin",
    "Linux": "x86_64-unknown-linux-gnu",
}


@dataclass
class BenchResult:
    """One benchmark run, as stored in the published JSON files."""

    created_at: str = ""
    sha1: str = ""
    exec_time: dict[str, dict[str, float]] = field(default_factory=dict)
    binary_size: dict[str, int] = field(default_factory=dict)
    max_memory: dict[str, int] = field(default_factory=dict)
    thread_count: dict[str, int] = field(default_factory=dict)
    syscall_count: dict[str, int] = field(default_factory=dict)
    cargo_deps: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Return the result as plain JSON-ready data."""
        return asdict(self)


@dataclass
class StraceOutput:
    """One row of an ``strace -c`` summary."""

    percent_time: float
    seconds: float
    usecs_per_call: int | None
    calls: int
    errors: int


def _int_map(name: str, value: Any) -> dict[str, int]:
    if not isinstance(value, dict):
        raise ValueError(f"field {name!r} must be an object")
    result: dict[str, int] = {}
    for key, item in value.items():
        if isinstance(item, bool) or not isinstance(item, int) or item < 0:
            raise ValueError(f"field {name!r} holds a non-integer value for {key!r}")
        result[str(key)] = item
    return result


def bench_result_from_dict(data: Any) -> BenchResult:
    """Build a :class:`BenchResult` from decoded JSON, raising ValueError if malformed."""
    if not isinstance(data, dict):
        raise ValueError("a benchmark result must be a JSON object")
    missing = [f.name for f in fields(BenchResult) if f.name not in data]
    if missing:
        raise ValueError(f"missing field {missing[0]!r}")
    for name in ("created_at", "sha1"):
        if not isinstance(data[name], str):
            raise ValueError(f"field {name!r} must be a string")

    exec_time_raw = data["exec_time"]
    if not isinstance(exec_time_raw, dict):
        raise ValueError("field 'exec_time' must be an object")
    exec_time: dict[str, dict[str, float]] = {}
    for bench, stats in exec_time_raw.items():
        if not isinstance(stats, dict):
            raise ValueError(f"exec_time entry {bench!r} must be an object")
        try:
            exec_time[str(bench)] = {str(k): float(v) for k, v in stats.items()}
        except (TypeError, ValueError):
            raise ValueError(f"exec_time entry {bench!r} holds a non-number") from None

    return BenchResult(
        created_at=data["created_at"],
        sha1=data["sha1"],
        exec_time=exec_time,
        binary_size=_int_map("binary_size", data["binary_size"]),
        max_memory=_int_map("max_memory", data["max_memory"]),
        thread_count=_int_map("thread_count", data["thread_count"]),
        syscall_count=_int_map("syscall_count", data["syscall_count"]),
        cargo_deps=_int_map("cargo_deps", data["cargo_deps"]),
    )


def get_target() -> str:
    """Return the target triple the benchmark binaries are built for."""
    system = platform.system()
    try:
        return _TARGETS[system]
    except KeyError:
        raise RuntimeError(f"benchmarks are not supported on {system or 'this platform'}") from None


def bench_root_path() -> Path:
    """Return the benchmark directory, from $WRY_BENCH_ROOT or the working directory."""
    root = os.environ.get(BENCH_ROOT_ENV)
    return Path(root) if root else Path.cwd()


def target_dir() -> Path:
    """Return the release directory that holds the built benchmark binaries."""
    return bench_root_path() / "tests" / "target" / get_target() / "release"


def wry_root_path() -> Path:
    """Return the repository root, the parent of the benchmark directory."""
    return bench_root_path().parent


def _check_command(cmd: Sequence[str]) -> list[str]:
    args = [str(part) for part in cmd]
    if not args:
        raise ValueError("empty command")
    return args


def run_collect(cmd: Sequence[str]) -> tuple[str, str]:
    """Run ``cmd`` and return its stdout and stderr; raise CalledProcessError on failure."""
    args = _check_command(cmd)
    proc = subprocess.run(
        args, stdin=subprocess.PIPE, stdout=subprocess.PIPE, stderr=subprocess.PIPE
    )
    stdout = proc.stdout.decode("utf-8")
    stderr = proc.stderr.decode("utf-8")
    if proc.returncode != 0:
        print(f"stdout: <<<{stdout}>>>", file=sys.stderr)
        print(f"stderr: <<<{stderr}>>>", file=sys.stderr)
        raise subprocess.CalledProcessError(proc.returncode, args, stdout, stderr)
    return stdout, stderr


def parse_max_mem(file_path: str | os.PathLike[str]) -> int | None:
    """Return the peak memory in bytes from an mprof data file, then delete the file."""
    path = Path(file_path)
    highest = 0
    for line in path.read_text().splitlines():
        parts = line.split(" ")
        if len(parts) == 3:
            # mprof reports megabytes
            current = int(float(parts[1])) * 1024 * 1024
            highest = max(highest, current)
    path.unlink()
    return highest if highest > 0 else None


def parse_strace_output(output: str) -> dict[str, StraceOutput]:
    """Parse the summary table printed by ``strace -c``."""
    lines = [line for line in output.splitlines() if line and "detached ..." not in line]
    if len(lines) < 4:
        return {}

    total_line = lines[-1]
    summary: dict[str, StraceOutput] = {}
    for line in lines[2:-2]:
        parts = line.split()
        if 5 <= len(parts) <= 6:
            summary[parts[-1]] = StraceOutput(
                percent_time=float(parts[0]),
                seconds=float(parts[1]),
                usecs_per_call=int(parts[2]),
                calls=int(parts[3]),
                errors=int(parts[4]) if len(parts) == 6 else 0,
            )

    total = total_line.split()
    summary["total"] = StraceOutput(
        percent_time=float(total[0]),
        seconds=float(total[1]),
        usecs_per_call=None,
        calls=int(total[2]),
        errors=int(total[3]),
    )
    return summary


def run(cmd: Sequence[str]) -> None:
    """Run ``cmd`` with inherited output; raise CalledProcessError on failure."""
    args = _check_command(cmd)
    proc = subprocess.run(args, stdin=subprocess.PIPE)
    if proc.returncode != 0:
        raise subprocess.CalledProcessError(proc.returncode, args)


def read_json(filename: str | os.PathLike[str]) -> Any:
    """Read and decode a JSON file."""
    with open(filename, encoding="utf-8") as handle:
        return json.load(handle)


def write_json(filename: str | os.PathLike[str], value: Any) -> None:
    """Write ``value`` to ``filename`` as compact JSON."""
    with open(filename, "w", encoding="utf-8") as handle:
        json.dump(value, handle, separators=(",", ":"))