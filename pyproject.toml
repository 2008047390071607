[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "clice"
version = "0.1.0"
description = "Building blocks for a C++ language server: an asyncio task runtime, LSP message framing, a raw C++ lexer, preamble and module-name scanning, compile-command cleanup and LSP position conversion."
requires-python = ">=3.11"
dependencies = []
keywords = [
    "language-server",
    "lsp",
    "c++",
    "asyncio",
    "lexer",
    "compile-commands",
    "utf-16",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Framework :: AsyncIO",
    "Topic :: Software Development :: Libraries :: Python Modules",
    "Topic :: Text Editors :: Integrated Development Environments (IDE)",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = [
    "pytest",
    "pytest-asyncio",
]

[tool.hatch.build.targets.wheel]
packages = ["clice"]

[tool.hatch.build.targets.sdist]
include = [
    "clice",
    "tests",
    "README.md",
]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py311"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.11"
warn_unused_ignores = true
warn_redundant_casts = true
