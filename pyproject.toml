[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "openbadger"
version = "0.1.0"
description = "Collector and sensor node runtime for a network asset inventory: enrollment, heartbeats, state and observation batches."
requires-python = ">=3.10"
dependencies = [
    "httpx",
]
keywords = [
    "asset-inventory",
    "network-discovery",
    "monitoring",
    "observations",
    "heartbeat",
    "collector",
    "sensor",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: System Administrators",
    "Intended Audience :: Information Technology",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Networking :: Monitoring",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["openbadger"]

[tool.hatch.build.targets.sdist]
include = [
    "openbadger",
    "tests",
]

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
