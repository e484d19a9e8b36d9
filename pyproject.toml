[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "floodsim"
version = "0.1.0"
description = "Grid-based rainfall and surface flood simulation over ESRI ASCII elevation models"
requires-python = ">=3.10"
keywords = [
    "flood",
    "hydrology",
    "simulation",
    "rainfall",
    "dem",
    "overland-flow",
    "idf",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Hydrology",
]
dependencies = [
    "numpy",
    "pygame",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
floodsim = "floodsim.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["floodsim"]

[tool.hatch.build.targets.sdist]
include = [
    "floodsim",
    "tests",
    "pyproject.toml",
    "README.md",
]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
