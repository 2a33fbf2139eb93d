[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "dicomscan"
version = "0.1.0"
description = "Scan DICOM files: detect the preamble, find tags, decode values and list elements"
requires-python = ">=3.10"
dependencies = []
keywords = ["dicom", "medical imaging", "tags", "parser"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Healthcare Industry",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Scientific/Engineering :: Medical Science Apps.",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
dicomscan = "dicomscan.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["dicomscan"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
