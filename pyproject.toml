[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "esurfing"
version = "0.1.0"
description = "Pure-Python session ciphers (triple-DES, XTEA variants, SM4, ZUC) with a rotating logger and shutdown handling"
requires-python = ">=3.10"
dependencies = []
keywords = ["cipher", "des", "3des", "xtea", "sm4", "zuc", "logging"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Security :: Cryptography",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["esurfing"]

[tool.pytest.ini_options]
addopts = "-ra"
