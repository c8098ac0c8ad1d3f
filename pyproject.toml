[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "simso"
version = "0.1.0"
description = "A small simulated computer with an assembler, devices, processes and schedulers for a teaching operating system"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "simulator",
    "emulator",
    "operating system",
    "scheduler",
    "assembler",
    "education",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console :: Curses",
    "Intended Audience :: Education",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Education",
    "Topic :: System :: Emulators",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
simso = "simso.cli:main"
simso-asm = "simso.assembler:main"

[tool.hatch.build.targets.wheel]
packages = ["simso"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 88
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
