[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "posagent"
version = "0.1.0"
description = "Building blocks for a local point-of-sale printing agent: receipt model, TSPL2 label commands, CP1252 transcoding and service helpers."
requires-python = ">=3.10"
dependencies = []
keywords = [
    "pos",
    "point-of-sale",
    "receipt",
    "label",
    "tspl",
    "thermal-printer",
    "cp1252",
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
    "Topic :: Printing",
    "Topic :: Office/Business :: Financial :: Point-Of-Sale",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["posagent"]

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
warn_unused_ignores = true
warn_redundant_casts = true
