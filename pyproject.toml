[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "leoreplay"
version = "0.1.0"
description = "Emulated link queues (drop-tail, drop-head, PIE), TLS socket helpers, Apache replay configuration and live binned graphs"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "network emulation",
    "aqm",
    "pie",
    "packet queue",
    "drop-tail",
    "tls",
    "live graph",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Networking",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["leoreplay"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]
