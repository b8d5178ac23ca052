[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "kshcore"
version = "0.1.0"
description = "Core pieces of a Korn-style shell: printf formatting, number parsing, vis unescaping, glob matching, option parsing, path handling, signal names and command trees"
requires-python = ">=3.10"
dependencies = []
keywords = ["shell", "ksh", "glob", "getopt", "printf", "unvis", "command-tree"]
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
    "Topic :: System :: Shells",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["kshcore"]

[tool.pytest.ini_options]
addopts = "-ra"
