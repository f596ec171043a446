[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tdsvalues"
version = "0.1.0"
description = "Value types, wire encodings and result-stream handling for the TDS database protocol"
requires-python = ">=3.10"
dependencies = []
keywords = ["tds", "sql server", "mssql", "database", "protocol", "encoding"]
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
    "Topic :: Database",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["tdsvalues"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
