[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "wrykit"
version = "0.13.1"
description = "HTTP request and response types for custom webview protocols, plus benchmark tooling"
requires-python = ">=3.10"
dependencies = []
keywords = ["webview", "http", "custom-protocol", "benchmark", "strace", "hyperfine", "mprof"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Libraries",
    "Topic :: System :: Benchmark",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
wrykit-run-benchmark = "wrykit.run_benchmark:main"
wrykit-build-benchmark-jsons = "wrykit.build_benchmark_jsons:main"

[tool.hatch.build.targets.wheel]
packages = ["wrykit"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
strict = true
