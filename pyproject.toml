[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "wvcsolve"
version = "0.1.0"
description = "Minimum weight vertex cover: exact reductions, small and medium exact solvers, local search and GNN inference"
requires-python = ">=3.10"
dependencies = [
    "numpy",
]
keywords = [
    "vertex cover",
    "weighted vertex cover",
    "independent set",
    "graph reductions",
    "local search",
    "combinatorial optimization",
    "max flow",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Mathematics",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["wvcsolve"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
