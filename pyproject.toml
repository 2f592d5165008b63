[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "digitnet"
version = "0.1.0"
description = "A small two-layer neural network that learns handwritten digits from MNIST and serves predictions over HTTP"
requires-python = ">=3.10"
keywords = ["mnist", "neural-network", "digit-recognition", "machine-learning", "numpy"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Environment :: Web Environment",
    "Intended Audience :: Education",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Image Recognition",
    "Topic :: Scientific/Engineering :: Artificial Intelligence",
]
dependencies = [
    "numpy",
    "pillow",
    "scipy",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
digitnet = "digitnet.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["digitnet"]

[tool.pytest.ini_options]
addopts = "-ra"
