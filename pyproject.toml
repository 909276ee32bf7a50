[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "zgo"
version = "0.1.0"
description = "Cross-compile Go programs with cgo using Zig as the C/C++ toolchain"
requires-python = ">=3.11"
dependencies = []
keywords = ["go", "zig", "cgo", "cross-compilation", "build"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Build Tools",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
zgo = "zgo.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["zgo"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
