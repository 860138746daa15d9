[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "fintrade"
version = "0.1.0"
description = "An in-memory ledger and order-matching trading platform with an HTTP server and an interactive client"
requires-python = ">=3.10"
dependencies = []
keywords = ["ledger", "accounts", "order book", "matching engine", "trading"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Financial and Insurance Industry",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Office/Business :: Financial :: Investment",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
fintrade-server = "fintrade.server:main"
fintrade-cli = "fintrade.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["fintrade"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
