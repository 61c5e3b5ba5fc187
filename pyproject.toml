[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "ckpoolkit"
version = "0.9.9"
description = "Helpers for a mining pool: SHA-256, lookup3 hashing, hex/base58/bech32 encoding, difficulty maths, JSON picking and TCP socket helpers"
requires-python = ">=3.10"
dependencies = []
keywords = ["mining", "pool", "stratum", "sha256", "difficulty", "base58", "bech32"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Libraries",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["ckpoolkit"]

[tool.pytest.ini_options]
addopts = "-ra"
