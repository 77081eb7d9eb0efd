[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "flowkit"
version = "1.0.0"
description = "Workflow authoring, worker and client toolkit for a durable task engine, with a linter version checker."
requires-python = ">=3.10"
dependencies = [
    "pyyaml",
]
keywords = [
    "workflow",
    "durable",
    "orchestration",
    "activities",
    "task-hub",
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
    "Topic :: Software Development :: Libraries :: Application Frameworks",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
flowkit-check-lint = "flowkit.lintcheck:main"

[tool.hatch.build.targets.wheel]
packages = ["flowkit"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
