# lumenrdr

Building blocks for a physically based renderer, written with numpy.

## What is inside

- `lumenrdr.vecmath`: small vector helpers (`vec`, `dot`, `cross`,
  `square_norm`, `norm`, `normalize`, `all_close`, `sign`, `next_2_pow`,
  `to_string`) and constants such as `PI`, `EPS`, `RAY_DEFAULT_MIN` and
  `RAY_DEFAULT_MAX`.
- `lumenrdr.properties`: `Properties`, a typed parameter map built from
  JSON-like data with `Properties.from_json` (a mapping or JSON text). Values
  are read with `get`, `get_float` (an int is widened) and `get_vec` (an
  integer vector is widened), written with `set`, and printed in a JSON-like
  layout with `to_string`. A missing property without a default, or a value of
  the wrong kind, raises `RenderError`; a missing property with a default logs
  a warning and returns the default.
- `lumenrdr.factory`: `Factory`, a registry that maps identifiers to creator
  callables. `create` builds an object from `Properties` and records it in
  `Factory.context`; registering an identifier twice, or creating from an
  unknown one, raises `RenderError`.
- `lumenrdr.aabb`: `AABB`, an axis-aligned box of any dimension. The default
  box is empty (lower corner +inf, upper corner -inf). It offers `from_points`,
  `merged`, `union_with`, `union_point`, `center`, `extent`, `volume`, `dist`,
  `is_valid`, `is_inside`, `surface_area` (3-D only) and `to_string`.
- `lumenrdr.interaction`: `SurfaceInteraction` with the enums
  `SurfaceInteractionType`, `TransportMode` and `Measure`, and the `Shading`
  frame. Setters (`set_general`, `set_differential`, `set_shading`, `set_pdf`,
  `set_uv`, `set_bsdf_cache`, `set_primitive`) check their input and raise
  `ValueError` on non-finite values, non-unit normals or negative densities.
  `is_valid` raises `RenderError` for an interaction of type `NONE`.
- `lumenrdr.texture`: `UVMapping2D`, `ConstantTexture` and
  `CheckerBoardTexture`, built from `Properties` with
  `create_tex_coordinate_generator` and `create_texture`.
- `lumenrdr.quadtree`: `DirectionalQuadTree`, an adaptive quad tree over the
  unit square that learns a sampling density from committed RGB samples, with
  `commit`, `split_or_prune`, `pdf`, `sample`, `find_leaf` and `sanity_check`,
  plus the colour helpers `gamma_correction`, `xyz_to_lab_helper` and
  `rgb_to_cielab_lightness`.

## Installing

```
pip install .
```

Run the tests with:

```
pip install ".[test]"
pytest
```

## Example

```python
import random

from lumenrdr.interaction import SurfaceInteraction
from lumenrdr.properties import Properties
from lumenrdr.quadtree import DirectionalQuadTree
from lumenrdr.texture import create_texture

props = Properties.from_json({
    "type": "checkerboard",
    "tex_coordinate_generator": {"type": "uvmapping2d", "scale": [2.0, 2.0]},
})
texture = create_texture(props)

hit = SurfaceInteraction()
hit.set_uv([0.1, 0.1])
print(texture.evaluate(hit))  # color0, the default [0.4, 0.4, 0.4]

tree = DirectionalQuadTree()
tree.commit([0.25, 0.25], [1.0, 1.0, 1.0])
tree.split_or_prune()
point, pdf, leaf = tree.sample(random.Random(1))
print(point, pdf, tree.pdf(point))
```

Scene parameters follow a subset of JSON. Numeric arrays must have 2, 3 or 16
entries: 2 or 3 entries become an int or float vector, 16 entries become a
4x4 float matrix. Arrays of objects become lists of `Properties`. Any other
array is rejected with `RenderError`.

## What it does not do

This package holds the data structures and helpers around a renderer, not a
renderer. It has no command-line program, traces no rays against geometry
(there are no shapes, meshes or acceleration structures), computes no
reflectance or material terms, loads no image textures or mesh files, and
writes no images. `Factory` starts empty: nothing is registered in it until
you register creators yourself.