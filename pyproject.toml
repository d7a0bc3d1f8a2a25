[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "kubeboard"
version = "0.1.0"
description = "Read Kubernetes deployments with their pods, services and ingresses, and render them as HTML tables, JSON and Mermaid graphs."
requires-python = ">=3.10"
keywords = ["kubernetes", "deployments", "ingress", "mermaid", "html"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Systems Administration",
]
dependencies = [
    "requests",
    "pyyaml",
]

[project.optional-dependencies]
test = [
    "pytest",
    "responses",
]

[tool.hatch.build.targets.wheel]
packages = ["kubeboard"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
