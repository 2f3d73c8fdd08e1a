[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "symdemangle"
version = "0.8.0"
description = "Small, dependency-free demangler for Itanium C++ ABI symbol names, with logging flag and log-normalisation helpers"
requires-python = ">=3.10"
dependencies = []
keywords = ["demangle", "itanium", "abi", "symbols", "stack trace", "debugging"]
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
    "Topic :: Software Development :: Debuggers",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
symdemangle = "symdemangle.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["symdemangle"]

[tool.pytest.ini_options]
addopts = "-ra"
