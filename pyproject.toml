[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "progline"
version = "0.1.0"
description = "Building blocks for terminal progress output: rate-limited draw targets, multi-line layouts, iterable and stream wrappers, and human-readable formatting"
requires-python = ">=3.10"
dependencies = [
    "wcwidth",
]
keywords = ["progress", "terminal", "cli", "formatting", "ansi"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: User Interfaces",
    "Topic :: Terminals",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["progline"]

[tool.pytest.ini_options]
addopts = "-ra"
