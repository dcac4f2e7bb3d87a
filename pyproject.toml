[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "firlr"
version = "0.1.0"
description = "Grammar analysis, LR(0) parse tables and an indentation-aware FIRRTL tokenizer"
requires-python = ">=3.10"
dependencies = []
keywords = ["parser", "lr0", "grammar", "firrtl", "tokenizer", "compiler"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Compilers",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
firlr-tokenize = "firlr.tokenizer:main"
firlr-demo = "firlr.demo:main"

[tool.hatch.build.targets.wheel]
packages = ["firlr"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
