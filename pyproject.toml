[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "capvapi"
version = "0.1.0"
description = "vSphere cluster infrastructure API types (v1alpha3) with cloud-provider INI encoding and manifest conversion"
requires-python = ">=3.10"
dependencies = []
keywords = ["vsphere", "cluster-api", "kubernetes", "infrastructure", "ini", "manifest"]
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

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["capvapi"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
