[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "quillchunk"
version = "0.1.0"
description = "Hierarchical, heading-aware chunking of paged text into token-bounded pieces."
requires-python = ">=3.10"
dependencies = []
keywords = ["chunking", "tokens", "markdown", "headings", "retrieval", "text-splitting"]
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
    "Topic :: Text Processing :: General",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["quillchunk"]

[tool.hatch.build.targets.sdist]
include = ["quillchunk", "tests"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
files = ["quillchunk"]
