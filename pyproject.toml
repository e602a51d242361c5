[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "bytebraise"
version = "0.1.0"
description = "A BitBake-style variable datastore with flags, overrides, expansion and append/prepend/remove handling"
requires-python = ">=3.10"
dependencies = []
keywords = ["bitbake", "datastore", "overrides", "variable expansion", "build"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Build Tools",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["bytebraise"]

[tool.pytest.ini_options]
addopts = "-ra"
