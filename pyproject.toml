[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "trainingkit"
version = "0.1.0"
description = "Data structures and small services: heaps, tries, B-trees, a spell checker, schedulers, a parking garage and an auction server."
requires-python = ">=3.10"
dependencies = []
keywords = [
    "b-tree",
    "trie",
    "heap",
    "fibonacci-heap",
    "edit-distance",
    "spell-checker",
    "scheduler",
    "auction",
    "rate-limiter",
    "wsgi",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
trainingkit-parking = "trainingkit.parking:main"
trainingkit-spellcheck = "trainingkit.spellcheck:main"
trainingkit-scheduler-sim = "trainingkit.simulation:main"
trainingkit-auction-server = "trainingkit.auction_server:main"

[tool.hatch.build.targets.wheel]
packages = ["trainingkit"]

[tool.hatch.build.targets.sdist]
include = ["trainingkit", "tests", "README.md", "pyproject.toml"]

[tool.pytest.ini_options]
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
