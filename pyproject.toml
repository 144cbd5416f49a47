[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "dbustree"
version = "0.1.0"
description = "D-Bus value holders, messages and an object-path proxy tree with interface property caching"
requires-python = ">=3.10"
dependencies = []
keywords = ["dbus", "d-bus", "object manager", "proxy", "properties", "ipc"]
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
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["dbustree"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
