[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "egraphcore"
version = "0.1.0"
description = "Core data structures for an e-graph engine: timestamped tables, column indexes, rule IR and type-constraint solving."
requires-python = ">=3.10"
dependencies = []
keywords = ["e-graph", "equality saturation", "datalog", "type inference", "rewriting"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Compilers",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["egraphcore"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
