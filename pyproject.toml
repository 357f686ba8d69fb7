[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "nfsnaming"
version = "0.1.0"
description = "Naming-server core for a small network file system: path trie, lookup cache, replica failover and request handlers."
requires-python = ">=3.10"
dependencies = []
keywords = ["naming server", "distributed file system", "trie", "lru cache", "replication"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Distributed Computing",
    "Topic :: System :: Filesystems",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["nfsnaming"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
