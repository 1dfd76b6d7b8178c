[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "imagefeatures"
version = "0.1.0"
description = "SIFT descriptors and matching, image filters, B-spline kernels and signal helpers for grayscale images"
requires-python = ">=3.10"
keywords = ["sift", "descriptors", "feature matching", "convolution", "b-spline", "image processing"]
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
    "Topic :: Scientific/Engineering :: Image Recognition",
]
dependencies = [
    "numpy",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["imagefeatures"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
