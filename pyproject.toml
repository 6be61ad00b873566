[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "heapstore"
version = "0.1.0"
description = "Slotted heap pages with fixed headers, LSNs and checksums for a page-based storage engine"
requires-python = ">=3.10"
dependencies = []
keywords = ["database", "storage", "heap", "page", "slotted-page"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Database :: Database Engines/Servers",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["heapstore"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
