[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "boundkmeans"
version = "0.1.0"
description = "Kernel k-means clustering, plain and pruned with Elkan's triangle-inequality bounds, with k-means++ seeding and a command-driven experiment runner"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "k-means",
    "clustering",
    "kernel k-means",
    "elkan",
    "triangle inequality",
    "k-means++",
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
    "Topic :: Scientific/Engineering :: Information Analysis",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
boundkmeans = "boundkmeans.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["boundkmeans"]

[tool.hatch.build.targets.sdist]
include = ["boundkmeans", "tests", "pyproject.toml", "README.md"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
