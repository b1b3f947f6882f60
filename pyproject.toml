[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "prana"
version = "0.1.0"
description = "SQL migration scripts and schema-driven model descriptions for relational databases"
requires-python = ">=3.10"
dependencies = []
keywords = ["sql", "migrations", "database", "schema", "models"]
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
    "Topic :: Software Development :: Code Generators",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["prana"]

[tool.pytest.ini_options]
addopts = "-ra"
