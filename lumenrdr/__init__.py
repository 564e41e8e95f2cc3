"""Building blocks for a physically based renderer: vector math, properties,
a factory, bounding boxes, surface interactions, textures and a quad tree."""

__version__ = "0.1.0"