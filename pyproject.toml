[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "multiphysfem"
version = "0.1.0"
description = "A small finite element solver for heat conduction, electric conduction and Joule heating in 1D and 2D"
requires-python = ">=3.10"
keywords = [
    "finite element",
    "fem",
    "heat transfer",
    "joule heating",
    "electric conduction",
    "vtk",
    "multiphysics",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Environment :: Console",
    "Topic :: Scientific/Engineering :: Physics",
    "Topic :: Scientific/Engineering :: Mathematics",
]
dependencies = [
    "numpy",
    "scipy",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
multiphysfem = "multiphysfem.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["multiphysfem"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
