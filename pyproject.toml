[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "ctxstore"
version = "0.1.0"
description = "Content-addressed object storage, refs, narrative documents and prompt packs for agent context tracking"
requires-python = ">=3.10"
keywords = ["content-addressed", "object-store", "blake3", "zstd", "version-control", "llm-context"]
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
    "Topic :: Software Development :: Version Control",
]
dependencies = [
    "zstandard",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["ctxstore"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
