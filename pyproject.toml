[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "gleapcli"
version = "0.3.0"
description = "Command-line client and library for the Gleap customer support API"
requires-python = ">=3.10"
dependencies = [
    "httpx",
    "platformdirs",
]
keywords = ["gleap", "support", "tickets", "cli", "helpdesk"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: Customer Service",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Office/Business",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
gleap = "gleapcli.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["gleapcli"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
