"""Surface interactions recorded along a light path."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

import numpy as np

from lumenrdr.properties import RenderError
from lumenrdr.vecmath import RAY_DEFAULT_MAX, all_close, cross, dot, normalize
from lumenrdr.vecmath import to_string as _format_vector

_NORMALIZED_TOLERANCE = 1e-3
_NEAR_TOLERANCE = 1e-3


class SurfaceInteractionType(Enum):
    """Interaction kinds that change how a path is integrated."""

    NONE = 0
    DIFFUSE = 1
    GLOSSY = 2
    SPECULAR = 3
    LIGHT = 4
    INF_LIGHT = 5


class TransportMode(Enum):
    """Whether radiance or importance is carried along the path."""

    RADIANCE = 0
    IMPORTANCE = 1


class Measure(Enum):
    """Measure in which a sampling density is expressed."""

    UNKNOWN = 0
    SOLID_ANGLE = 1
    AREA = 2
    DISCRETE = 3


def _zeros(n: int) -> np.ndarray:
    return np.zeros(n, dtype=np.float64)


def _as_vec(value: Any) -> np.ndarray:
    return np.array(value, dtype=np.float64).reshape(-1)


def _check_finite(*values: Any) -> None:
    for value in values:
        if not np.all(np.isfinite(np.asarray(value, dtype=np.float64))):
            raise ValueError(f"value is not finite: {value!r}")


def _check_normalized(v: np.ndarray) -> None:
    length = math.sqrt(dot(v, v))
    if abs(length - 1.0) > _NORMALIZED_TOLERANCE:
        raise ValueError(f"vector is not normalized: {v.tolist()}")


def _format_float(value: float) -> str:
    text = str(np.float32(value))
    return text[:-2] if text.endswith(".0") else text


@dataclass
class Shading:
    """Shading frame, which may differ from the geometric one."""

    n: np.ndarray = field(default_factory=lambda: _zeros(3))
    dpdu: np.ndarray = field(default_factory=lambda: _zeros(3))
    dpdv: np.ndarray = field(default_factory=lambda: _zeros(3))
    dndu: np.ndarray = field(default_factory=lambda: _zeros(3))
    dndv: np.ndarray = field(default_factory=lambda: _zeros(3))


@dataclass
class SurfaceInteraction:
    """A point on a surface or light hit or sampled along a path.

    ``wi`` points along the incoming ray away from ``p``; ``wo`` points
    along the outgoing ray away from ``p``. Both are in world space.
    """

    type: SurfaceInteractionType = SurfaceInteractionType.NONE
    mode: TransportMode = TransportMode.RADIANCE
    p: np.ndarray = field(default_factory=lambda: _zeros(3))
    dist: float = RAY_DEFAULT_MAX
    normal: np.ndarray = field(default_factory=lambda: _zeros(3))
    wi: np.ndarray = field(default_factory=lambda: _zeros(3))
    wo: np.ndarray = field(default_factory=lambda: _zeros(3))
    pdf: float = 0.0
    measure: Measure = Measure.UNKNOWN
    bsdf: Any = None
    light: Any = None
    primitive: Any = None
    bsdf_cache: np.ndarray = field(default_factory=lambda: _zeros(3))
    dpdx: np.ndarray = field(default_factory=lambda: _zeros(3))
    dpdy: np.ndarray = field(default_factory=lambda: _zeros(3))
    dudx: float = 0.0
    dvdx: float = 0.0
    dudy: float = 0.0
    dvdy: float = 0.0
    uv: np.ndarray = field(default_factory=lambda: _zeros(2))
    dpdu: np.ndarray = field(default_factory=lambda: _zeros(3))
    dpdv: np.ndarray = field(default_factory=lambda: _zeros(3))
    dndu: np.ndarray = field(default_factory=lambda: _zeros(3))
    dndv: np.ndarray = field(default_factory=lambda: _zeros(3))
    shading: Shading = field(default_factory=Shading)

    # --- setters -------------------------------------------------------

    def set_primitive(self, bsdf: Any, light: Any, primitive: Any) -> None:
        self.bsdf = bsdf
        self.light = light
        self.primitive = primitive

    def set_general(self, p, normal) -> None:
        """Set position and normal; the shading normal follows the normal."""
        p, normal = _as_vec(p), _as_vec(normal)
        _check_finite(p, normal)
        _check_normalized(normal)
        self.p = p
        self.normal = normal
        self.shading.n = normal.copy()

    def set_uv(self, uv) -> None:
        uv = _as_vec(uv)
        _check_finite(uv)
        self.uv = uv

    def set_differential(self, p, normal, uv, dpdu, dpdv, dndu, dndv) -> None:
        """Set the full differential geometry and the default shading frame."""
        p, normal, uv = _as_vec(p), _as_vec(normal), _as_vec(uv)
        dpdu, dpdv = _as_vec(dpdu), _as_vec(dpdv)
        dndu, dndv = _as_vec(dndu), _as_vec(dndv)
        _check_finite(p, normal, uv, dpdu, dpdv, dndu, dndv)
        _check_normalized(normal)
        expected = np.abs(normalize(cross(dpdu, dpdv)))
        if not all_close(np.abs(normal), expected, _NEAR_TOLERANCE):
            raise ValueError("normal does not match the cross product of dpdu and dpdv")
        self.p = p
        self.normal = normal
        self.uv = uv
        self.dpdu = dpdu
        self.dpdv = dpdv
        self.dndu = dndu
        self.dndv = dndv
        self.shading = Shading(
            normal.copy(), dpdu.copy(), dpdv.copy(), dndu.copy(), dndv.copy()
        )

    def set_shading(self, normal, dpdu, dpdv, dndu, dndv) -> None:
        normal = _as_vec(normal)
        dpdu, dpdv = _as_vec(dpdu), _as_vec(dpdv)
        dndu, dndv = _as_vec(dndu), _as_vec(dndv)
        _check_finite(normal, dpdu, dpdv, dndu, dndv)
        _check_normalized(normal)
        self.shading = Shading(normal, dpdu, dpdv, dndu, dndv)

    def set_pdf(self, pdf: float, measure: Measure) -> None:
        _check_finite(pdf)
        if pdf < 0:
            raise ValueError(f"pdf must be non-negative, got {pdf}")
        self.pdf = float(pdf)
        self.measure = measure

    def set_bsdf_cache(self, value) -> None:
        value = _as_vec(value)
        _check_finite(value)
        self.bsdf_cache = value

    # --- geometry helpers ----------------------------------------------

    def cos_theta_i(self) -> float:
        return dot(self.shading.n, self.wi)

    def cos_theta_o(self) -> float:
        return dot(self.shading.n, self.wo)

    def cos_theta(self, w) -> float:
        return dot(self.shading.n, w)

    # --- classification ------------------------------------------------

    def is_radiance(self) -> bool:
        return self.mode is TransportMode.RADIANCE

    def is_diffuse(self) -> bool:
        return self.type is SurfaceInteractionType.DIFFUSE

    def is_glossy(self) -> bool:
        return self.type is SurfaceInteractionType.GLOSSY

    def is_specular(self) -> bool:
        return self.type is SurfaceInteractionType.SPECULAR

    def is_light(self) -> bool:
        return self.type in (
            SurfaceInteractionType.LIGHT,
            SurfaceInteractionType.INF_LIGHT,
        )

    def is_inf_light(self) -> bool:
        return self.type is SurfaceInteractionType.INF_LIGHT

    def is_geometry(self) -> bool:
        return self.type in (
            SurfaceInteractionType.DIFFUSE,
            SurfaceInteractionType.GLOSSY,
            SurfaceInteractionType.SPECULAR,
        )

    def is_valid(self) -> bool:
        """Whether the object this interaction refers to is present."""
        if self.type is SurfaceInteractionType.NONE:
            raise RenderError("Interaction type is NONE")
        if self.is_light():
            return self.light is not None
        if self.is_geometry():
            return self.bsdf is not None
        return False

    def to_string(self) -> str:
        return (
            "SurfaceInteraction[\n"
            f"  p =      {_format_vector(self.p)},\n"
            f"  normal = {_format_vector(self.normal)},\n"
            f"  wi =     {_format_vector(self.wi)},\n"
            f"  wo =     {_format_vector(self.wo)},\n"
            f"  pdf =    {_format_float(self.pdf)}\n]"
        )