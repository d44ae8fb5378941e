[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tdsproto"
version = "0.1.0"
description = "Typed values, wire encodings of date, time and XML values, and result-stream handling for the TDS database protocol"
requires-python = ">=3.10"
dependencies = []
keywords = ["tds", "sql-server", "mssql", "protocol", "database"]
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
    "Topic :: Database :: Front-Ends",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["tdsproto"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
