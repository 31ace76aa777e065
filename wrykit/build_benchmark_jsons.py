"""Merge the latest benchmark result into the published history files."""

from __future__ import annotations

import argparse
import json
import os
import sys
from pathlib import Path
from typing import Sequence, TypeVar

from .bench_utils import (
    BenchResult,
    bench_result_from_dict,
    read_json,
    target_dir,
    write_json,
    wry_root_path,
)

T = TypeVar("T")

RECENT_COUNT = 20
DATA_FILE = "wry-data.json"
RECENT_FILE = "wry-recent.json"


def recent_results(all_data: Sequence[T], count: int = RECENT_COUNT) -> list[T]:
    """Return the last ``count`` entries, or all of them if there are fewer."""
    if count < 0:
        raise ValueError("count must not be negative")
    if len(all_data) > count:
        return list(all_data[len(all_data) - count :])
    return list(all_data)


def build_benchmark_jsons(
    data_dir: str | os.PathLike[str], current_file: str | os.PathLike[str]
) -> tuple[list[BenchResult], list[BenchResult]]:
    """Append the current result to the history and rewrite the full and recent files.

    Returns the full history and the recent slice that were written.
    """
    data_path = Path(data_dir) / DATA_FILE
    recent_path = Path(data_dir) / RECENT_FILE

    current = bench_result_from_dict(read_json(current_file))
    history = read_json(data_path)
    if not isinstance(history, list):
        raise ValueError(f"{data_path} must hold a JSON array")
    all_data = [bench_result_from_dict(item) for item in history]
    all_data.append(current)
    recent = recent_results(all_data)

    write_json(data_path, [item.to_dict() for item in all_data])
    write_json(recent_path, [item.to_dict() for item in recent])
    return all_data, recent


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Merge the latest benchmark result into the published history."
    )
    parser.add_argument("--data-dir", type=Path, help="directory holding the history files")
    parser.add_argument("--current", type=Path, help="the bench.json of the latest run")
    args = parser.parse_args(argv)

    data_dir = args.data_dir or wry_root_path() / "gh-pages"
    current = args.current or target_dir() / "bench.json"
    try:
        build_benchmark_jsons(data_dir, current)
    except (OSError, ValueError, json.JSONDecodeError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())