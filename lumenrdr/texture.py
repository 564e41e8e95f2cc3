"""Texture coordinate generators and procedural textures."""

from __future__ import annotations

from abc import ABC, abstractmethod

import numpy as np

from lumenrdr.interaction import SurfaceInteraction
from lumenrdr.properties import Properties, RenderError
from lumenrdr.vecmath import to_string as _format_vector


class TexCoordinateGenerator(ABC):
    """Maps a surface interaction to texture coordinates."""

    def __init__(self, props: Properties) -> None:
        self.properties = props

    @abstractmethod
    def map(
        self, interaction: SurfaceInteraction
    ) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
        """Return ``(st, dstdx, dstdy)``."""


class UVMapping2D(TexCoordinateGenerator):
    """Affine map of the surface (u, v): ``st = scale * uv + delta``."""

    def __init__(self, props: Properties) -> None:
        super().__init__(props)
        self.scale = props.get_vec("scale", np.array([1.0, 1.0]))
        self.delta = props.get_vec("delta", np.array([0.0, 0.0]))

    def map(
        self, interaction: SurfaceInteraction
    ) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
        dstdx = self.scale * np.array([interaction.dudx, interaction.dvdx])
        dstdy = self.scale * np.array([interaction.dudy, interaction.dvdy])
        st = self.scale * np.asarray(interaction.uv, dtype=np.float64) + self.delta
        return st, dstdx, dstdy

    def to_string(self) -> str:
        return (
            "UVMapping2D [\n"
            f"  scale  = {_format_vector(self.scale)}\n"
            f"  delta  = {_format_vector(self.delta)}\n"
            "]"
        )


class Texture(ABC):
    """A colour that varies over a surface."""

    def __init__(self, props: Properties) -> None:
        self.properties = props

    @abstractmethod
    def evaluate(self, interaction: SurfaceInteraction) -> np.ndarray:
        """Colour at the given interaction."""


class ConstantTexture(Texture):
    """The same colour everywhere."""

    def __init__(self, props: Properties) -> None:
        super().__init__(props)
        self.color = props.get_vec("color")

    def evaluate(self, interaction: SurfaceInteraction) -> np.ndarray:
        return self.color.copy()

    def to_string(self) -> str:
        return f"ConstantTexture [\n  color  = {_format_vector(self.color)}\n]"


class CheckerBoardTexture(Texture):
    """Two colours alternating over a grid of half-unit cells in st space."""

    def __init__(self, props: Properties) -> None:
        super().__init__(props)
        self.color0 = props.get_vec("color0", np.array([0.4, 0.4, 0.4]))
        self.color1 = props.get_vec("color1", np.array([0.2, 0.2, 0.2]))
        self.texmap = create_tex_coordinate_generator(
            props.get("tex_coordinate_generator")
        )

    def evaluate(self, interaction: SurfaceInteraction) -> np.ndarray:
        st, _, _ = self.texmap.map(interaction)
        x = 2 * (int(st[0] * 2) % 2) - 1
        y = 2 * (int(st[1] * 2) % 2) - 1
        return (self.color0 if x * y == 1 else self.color1).copy()

    def to_string(self) -> str:
        return (
            "CheckerBoardTexture [\n"
            f"  color0  = {_format_vector(self.color0)}\n"
            f"  color1  = {_format_vector(self.color1)}\n"
            "]"
        )


def create_tex_coordinate_generator(props: Properties) -> TexCoordinateGenerator:
    """Build the coordinate generator named by the ``type`` property."""
    if not isinstance(props, Properties):
        raise RenderError("tex_coordinate_generator must be an object")
    kind = props.get("type")
    if kind == "uvmapping2d":
        return UVMapping2D(props)
    raise RenderError(f"TexCoordinateGenerator type {kind} not supported")


def create_texture(props: Properties) -> Texture:
    """Build the texture named by the ``type`` property."""
    kind = props.get("type")
    if kind == "checkerboard":
        return CheckerBoardTexture(props)
    if kind == "constant":
        return ConstantTexture(props)
    raise RenderError(f"Texture type {kind} not supported")