# wrykit

`wrykit` has two parts:

- `wrykit.http` and `wrykit.errors`: the HTTP request and response types a
  webview's custom URL scheme handler works with, with validation of
  methods, status codes and headers.
- `wrykit.bench_utils`, `wrykit.run_benchmark` and
  `wrykit.build_benchmark_jsons`: tooling that measures benchmark binaries
  with external tools and keeps a JSON history of the results.

It has no dependencies outside the standard library.

## Installation

```
pip install wrykit
```

To run the test suite:

```
pip install "wrykit[test]"
pytest
```

## What wrykit does not do

wrykit does not open windows, embed or drive a webview, or run an event
loop. It does not register custom protocols or dispatch requests to
handlers. It provides only the request and response values such a handler
receives and returns, and the benchmark tooling. The benchmark binaries
themselves are not part of it; they must already be built.

## HTTP requests and responses

Responses are built with `ResponseBuilder`. Each setter returns the builder,
so calls chain:

```python
from wrykit.http import ResponseBuilder, Version

response = (
    ResponseBuilder()
    .status(206)
    .mimetype("video/mp4")
    .header("Accept-Ranges", "bytes")
    .header("Content-Length", 409600)
    .body(b"...")
)

response.status            # 206
response.mimetype          # "video/mp4"
response.version           # Version.HTTP_11
response.headers.get("accept-ranges")  # "bytes"
```

A fresh builder gives status 200, `Version.HTTP_11`, no headers and no
mimetype. `body()` accepts `bytes`, `bytearray`, `memoryview` or `str`; a
`str` is encoded as UTF-8.

The setters check what they are given, but they do not raise at once. The
builder keeps the first error and ignores later setters. `body()` then
raises that error instead of returning a response.

- `status()` takes an `int` from 100 to 999, or a three-digit string or
  bytes value of at least 100. Anything else raises
  `InvalidStatusCodeError`.
- `header()` takes a name that is a non-empty HTTP token and stores it in
  lower case. A bad name raises `InvalidHeaderNameError`.
- `header()` takes a value that is a `str`, `bytes` or `int`. Control
  characters other than tab raise `InvalidHeaderValueError`. An `int` is
  stored as its decimal text.
- `version()` takes a `Version` member or its string, such as `"HTTP/2.0"`.

`RequestBuilder` works the same way, with `method()`, `uri()`, `header()`
and `body()`. The default method is `Method.GET` and the default URI is the
empty string. A method that is empty or not a valid token raises
`InvalidMethodError`.

A `Request` exposes `method`, `uri`, `headers` and `body`.
`Request.into_parts()` returns its `RequestParts` and its body as a tuple.
`Response` exposes `status`, `mimetype`, `version`, `headers` and `body`.
Its head is a `ResponseParts`.

`Method` is a `str` subclass. It provides the standard methods as
attributes, such as `Method.GET` and `Method.POST`, and accepts any valid
extension token.

A `HeaderMap` holds headers:

- Names are matched without regard to case.
- `append()` keeps values that repeat.
- `get()` returns the first value for a name, or `None`.
- `get_all()` returns every value for a name, in insertion order.
- Iterating yields `(name, value)` pairs.
- `len()` counts all values.

The helpers `parse_method`, `parse_status`, `validate_header_name` and
`validate_header_value` run the same checks on their own, and raise at once.

## Errors

Every error derives from `wrykit.errors.WryError`. The following also
derive from `ValueError`:

- `InvalidHeaderNameError`
- `InvalidHeaderValueError`
- `InvalidUriError`
- `InvalidStatusCodeError`
- `InvalidMethodError`

Each of them keeps its cause in `detail`.

The module also defines these errors:

- `InitScriptError`
- `MessageSenderError`
- `RpcScriptError`, which carries `method` and `params`.
- `DuplicateCustomProtocolError`, which carries the `scheme` that was
  registered twice.

## Benchmarks

The benchmark directory is taken from the `WRY_BENCH_ROOT` environment
variable, or the current directory if it is unset. The repository root is
its parent. Built binaries are expected under
`tests/target/<target>/release/` in the benchmark directory. Only Linux
(`x86_64-unknown-linux-gnu`) and macOS (`x86_64-apple-darwin`) are
supported. On other systems, `get_target()` raises `RuntimeError`.

### Running the benchmarks

```
wrykit-run-benchmark
```

This command needs `hyperfine`, `cargo` and `git`. On Linux it also needs
`strace` and `mprof`. It does the following:

1. Times `wry_hello_world`, `wry_custom_protocol` and `wry_cpu_intensive`
   with `hyperfine`, keeping mean, stddev, user, system, min and max.
2. Records the sizes of the `libwry` and `libtao` rlibs and of each
   benchmark binary.
3. Counts dependencies with `cargo tree` for each target triple. For each
   of Windows, Linux and macOS it keeps the highest count.
4. On Linux, it also records thread counts and syscall counts with
   `strace -c -f`, and peak memory with `mprof`.
5. Prints the results as JSON and writes them to `bench.json` in the target
   directory.

A failing tool raises `subprocess.CalledProcessError` or `RuntimeError`.

### Updating the history

```
wrykit-build-benchmark-jsons [--data-dir DIR] [--current FILE]
```

This command does the following:

1. Reads the latest result, by default `bench.json` in the target
   directory.
2. Appends it to the history in `wry-data.json`. By default this file is in
   `gh-pages/` under the repository root.
3. Rewrites `wry-data.json`, and writes the 20 most recent entries to
   `wry-recent.json` in the same directory.

It exits with status 1 and a message on standard error if a file cannot be
read or holds malformed data.

### From Python

- `wrykit.bench_utils`:
  - `BenchResult` holds one run. `to_dict()` turns it into JSON-ready
    data, and `bench_result_from_dict()` turns such data back into a
    `BenchResult`, raising `ValueError` if it is malformed.
  - `parse_strace_output()` turns an `strace -c` summary into a dict of
    `StraceOutput` records, including a `"total"` entry.
  - `parse_max_mem()` returns the peak memory in bytes from an `mprof`
    data file, or `None`. It deletes the file afterwards.
  - `run()` and `run_collect()` run commands and raise
    `subprocess.CalledProcessError` on failure.
  - `read_json()` and `write_json()` load and save JSON files;
    `write_json()` writes compact JSON.
- `wrykit.build_benchmark_jsons`:
  - `recent_results()` returns the newest entries of a history.
  - `build_benchmark_jsons()` performs the merge for a given directory and
    result file, and returns the full and recent lists.
- `wrykit.run_benchmark`:
  - `extract_exec_times()` parses `hyperfine` results.
  - `count_tree_dependencies()` parses `cargo tree` output.
  - `rlib_size()` and `get_binary_sizes()` measure build output.