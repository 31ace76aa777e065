"""HTTP request and response types for custom webview protocols, and benchmark tooling."""

__version__ = "0.13.1"

__all__ = ["errors", "http", "bench_utils", "build_benchmark_jsons", "run_benchmark"]