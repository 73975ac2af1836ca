[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "grammatica"
version = "0.1.0"
description = "Weighted context-free and multiple context-free grammars, derivation trees, NEGRA export, equivalence relations and finite-state recognition"
requires-python = ">=3.10"
dependencies = []
keywords = ["grammar", "cfg", "pmcfg", "mcfg", "parsing", "negra", "automata", "linguistics"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Text Processing :: Linguistic",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["grammatica"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
