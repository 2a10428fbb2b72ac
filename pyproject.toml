[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "daxwire"
version = "0.1.0"
description = "CBOR wire encoding for DynamoDB attribute values, item keys and order-preserving decimals"
requires-python = ">=3.10"
dependencies = []
keywords = ["cbor", "dynamodb", "dax", "serialization", "decimal"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: File Formats",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["daxwire"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
