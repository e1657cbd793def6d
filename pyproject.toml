[build-system]
requires = ["setuptools>=61"]
build-backend = "setuptools.build_meta"

[project]
name = "dirtworld"
version = "0.1.0"
description = "A grid world of cells and forms with actors, movement, digging, groundwater simulation and simple world generation"
requires-python = ">=3.10"
dependencies = []
keywords = ["game", "simulation", "grid", "sandbox", "groundwater", "procedural-generation"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Games/Entertainment :: Simulation",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.setuptools.packages.find]
include = ["dirtworld*"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
