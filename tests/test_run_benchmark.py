import pytest

from wrykit import bench_utils
from wrykit.run_benchmark import (
    RESULT_KEYS,
    count_tree_dependencies,
    extract_exec_times,
    get_all_benchmarks,
    get_binary_sizes,
    rlib_size,
)


@pytest.fixture
def linux(monkeypatch):
    monkeypatch.setattr(bench_utils.platform, "system", lambda: "Linux")


def _make_deps(root, files):
    deps = root / "deps"
    deps.mkdir(parents=True)
    for name, size in files.items():
        (deps / name).write_bytes(b"x" * size)
    return root


def test_get_all_benchmarks(linux):
    benchmarks = get_all_benchmarks()
    assert [name for name, _ in benchmarks] == [
        "wry_hello_world",
        "wry_custom_protocol",
        "wry_cpu_intensive",
    ]
    assert benchmarks[0][1] == "tests/target/x86_64-unknown-linux-gnu/release/bench_hello_world"
    assert all(path.startswith("tests/target/") for _, path in benchmarks)


def test_rlib_size_counts_each_crate_once(tmp_path):
    target = _make_deps(
        tmp_path,
        {"libwry-aaa.rlib": 10, "libwry-bbb.rlib": 30, "libtao-ccc.rlib": 7, "libwry-aaa.d": 50},
    )
    assert rlib_size(target, "libwry") == 10
    assert rlib_size(target, "libtao") == 7


def test_rlib_size_without_match(tmp_path):
    target = _make_deps(tmp_path, {"libother-aaa.rlib": 5})
    with pytest.raises(ValueError):
        rlib_size(target, "libwry")


def test_get_binary_sizes(tmp_path, monkeypatch, linux):
    target = _make_deps(tmp_path / "out", {"libwry-a.rlib": 11, "libtao-b.rlib": 13})
    monkeypatch.chdir(tmp_path)
    for index, (_, path) in enumerate(get_all_benchmarks(), start=1):
        exe = tmp_path / path
        exe.parent.mkdir(parents=True, exist_ok=True)
        exe.write_bytes(b"b" * index)

    sizes = get_binary_sizes(target)
    assert sizes["wry_rlib"] == 11
    assert sizes["tao_rlib"] == 13
    assert sizes["wry_hello_world"] == 1
    assert sizes["wry_custom_protocol"] == 2
    assert sizes["wry_cpu_intensive"] == 3


def test_count_tree_dependencies_ignores_duplicates():
    output = "wry v0.13.1\nserde v1.0\nserde v1.0\nlog v0.4\n"
    assert count_tree_dependencies(output) == 2


def test_count_tree_dependencies_only_root():
    assert count_tree_dependencies("wry v0.13.1\n") == 0


def test_extract_exec_times_filters_keys():
    hyperfine = {
        "results": [
            {"command": "a", "mean": 0.5, "stddev": 0.1, "median": 0.4, "user": 0.2,
             "system": 0.05, "min": 0.3, "max": 0.9, "times": [0.3, 0.9]},
            {"command": "b", "mean": 1, "min": 1, "max": 1},
        ]
    }
    result = extract_exec_times(hyperfine, ["first", "second"])
    assert result["first"] == {
        "mean": 0.5, "stddev": 0.1, "user": 0.2, "system": 0.05, "min": 0.3, "max": 0.9
    }
    assert set(result["first"]) == set(RESULT_KEYS)
    assert result["second"] == {"mean": 1.0, "min": 1.0, "max": 1.0}


def test_extract_exec_times_stops_at_shorter_side():
    hyperfine = {"results": [{"mean": 0.5}]}
    assert extract_exec_times(hyperfine, ["only", "extra"]) == {"only": {"mean": 0.5}}