[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "towerdef"
version = "0.1.0"
description = "A small tower-defence map game with a tile-map level editor, map save/load and enemy-path validation"
requires-python = ">=3.10"
keywords = ["game", "tower-defense", "tilemap", "level-editor", "pygame"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment :: Real Time Strategy",
]
dependencies = [
    "pygame",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
towerdef = "towerdef.app:main"

[tool.hatch.build.targets.wheel]
packages = ["towerdef"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
