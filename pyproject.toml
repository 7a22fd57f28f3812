[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tictacto"
version = "0.1.0"
description = "Multiplayer tic-tac-toe game state with players, lobbies and queued client updates"
requires-python = ">=3.10"
keywords = ["tic-tac-toe", "game", "multiplayer", "lobby", "board-game"]
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
    "Topic :: Games/Entertainment :: Board Games",
]
dependencies = []

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["tictacto"]

[tool.hatch.build.targets.sdist]
include = ["tictacto", "tests"]

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
