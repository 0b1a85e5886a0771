[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "nbuild"
version = "0.1.0"
description = "Core pieces of a Ninja-compatible build runner: build state counters, pools, task output helpers, progress display and tracing"
requires-python = ">=3.10"
keywords = ["build", "ninja", "build-system", "progress", "trace"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Build Tools",
]
dependencies = []

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["nbuild"]

[tool.pytest.ini_options]
addopts = "-ra"
