[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "work_record"
version = "0.1.0"
description = "SQLite-backed storage, configuration and response helpers for tracking work records, requirements and issues"
requires-python = ">=3.10"
dependencies = []
keywords = ["work log", "requirements", "issues", "sqlite", "configuration"]
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
    "Topic :: Database",
    "Topic :: Office/Business :: Scheduling",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["work_record"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
