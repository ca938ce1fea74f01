[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "skyfare"
version = "0.1.0"
description = "Command-line scraper for airline airports, routes and flight fares, cached in SQLite"
requires-python = ">=3.10"
keywords = ["flights", "fares", "scraper", "airports", "sqlite", "vueling"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP",
]
dependencies = [
    "requests",
    "beautifulsoup4",
]

[project.optional-dependencies]
test = [
    "pytest",
    "responses",
]

[project.scripts]
skyfare = "skyfare.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["skyfare"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
