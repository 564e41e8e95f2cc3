[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "lumenrdr"
version = "0.1.0"
description = "Building blocks for a physically based renderer: vector math, scene properties, an object factory, bounding boxes, surface interactions, textures and a directional quad tree."
requires-python = ">=3.10"
dependencies = ["numpy"]
keywords = ["rendering", "ray tracing", "path tracing", "path guiding", "quadtree", "graphics"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Graphics :: 3D Rendering",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["lumenrdr"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
