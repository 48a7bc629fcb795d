[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "sivcheck"
version = "0.1.0"
description = "Lexical and syntax checker for .siv source files"
requires-python = ">=3.10"
keywords = ["lexer", "parser", "syntax", "checker", "tokenizer", "siv"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Compilers",
]
dependencies = [
    "tqdm",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
sivcheck = "sivcheck.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["sivcheck"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
