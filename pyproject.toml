[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "ecwidkit"
version = "0.1.0"
description = "Client library and command-line tool for the Ecwid REST API (abandoned carts and categories)"
requires-python = ">=3.10"
keywords = ["ecwid", "ecommerce", "rest", "api", "cli", "store", "carts", "categories"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Office/Business :: Financial :: Point-Of-Sale",
    "Topic :: Software Development :: Libraries :: Python Modules",
]
dependencies = [
    "pyyaml",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
ecwid = "ecwidkit.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["ecwidkit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "I", "B", "UP"]
