[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "dpysettings"
version = "0.1.0"
description = "XSETTINGS encoding, X resources, DPI helpers and display layout logic for a desktop session"
requires-python = ">=3.10"
dependencies = []
keywords = ["xsettings", "xresources", "display", "monitor", "dpi", "desktop"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Desktop Environment",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["dpysettings"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
