[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "investool"
version = "0.1.0"
description = "Clients for Chinese bond and company data services and a rule-based stock fundamentals checker"
requires-python = ">=3.10"
dependencies = [
    "requests",
]
keywords = ["stocks", "funds", "bonds", "fundamentals", "investment", "finance", "cashflow"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: Financial and Insurance Industry",
    "Natural Language :: Chinese (Simplified)",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Office/Business :: Financial :: Investment",
]

[project.optional-dependencies]
test = [
    "pytest",
    "responses",
]

[tool.hatch.build.targets.wheel]
packages = ["investool"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
