[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "onexutil"
version = "0.1.0"
description = "Service utilities: version parsing, string, network and file helpers, JWT tokens, query options, validation and cron-style job management."
requires-python = ">=3.10"
dependencies = [
    "pyjwt",
    "pyyaml",
]
keywords = [
    "semver",
    "version",
    "jwt",
    "pagination",
    "validation",
    "cron",
    "utilities",
]
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
    "Topic :: Software Development :: Libraries",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["onexutil"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]
