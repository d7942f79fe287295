[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "homeswitch"
version = "0.1.0"
description = "Infrared remote-control pulse encoding and decoding, and WeMo-style switches discoverable over UPnP"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "infrared",
    "ir",
    "remote",
    "nec",
    "rc5",
    "rc6",
    "pronto",
    "lego",
    "wemo",
    "upnp",
    "ssdp",
    "home-automation",
]
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
    "Topic :: Home Automation",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["homeswitch"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
