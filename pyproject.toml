[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "nudm"
version = "1.0.0"
description = "Unified Data Management building blocks for 5G cores: UE context, event exposure, data-change callbacks, NRF client and SQN helpers"
requires-python = ">=3.10"
keywords = ["5g", "udm", "core-network", "nrf", "event-exposure", "telecom"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Telecommunications Industry",
    "Intended Audience :: Developers",
    "Framework :: Flask",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Communications :: Telephony",
]
dependencies = [
    "flask>=2.2",
    "httpx>=0.24",
    "pyyaml>=6.0",
]

[project.optional-dependencies]
test = [
    "pytest>=7.0",
    "respx>=0.20",
]

[tool.hatch.build.targets.wheel]
packages = ["nudm"]

[tool.hatch.build.targets.sdist]
include = ["nudm", "tests", "pyproject.toml"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
ignore_missing_imports = true
