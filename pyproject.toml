[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "ocmadm"
version = "0.1.0"
description = "Preflight checks, hub add-on planning and resource reports for multicluster hubs"
requires-python = ">=3.10"
keywords = ["kubernetes", "multicluster", "hub", "cluster-management", "preflight", "kubeconfig"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Clustering",
]
dependencies = [
    "pyyaml",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["ocmadm"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
