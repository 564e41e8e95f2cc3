"""Axis-aligned bounding boxes of any dimension."""

from __future__ import annotations

import math
from dataclasses import dataclass, field

import numpy as np

from lumenrdr.vecmath import to_string as _format_vector


def _empty_low() -> np.ndarray:
    return np.full(3, math.inf)


def _empty_upper() -> np.ndarray:
    return np.full(3, -math.inf)


@dataclass(eq=False)
class AABB:
    """A box spanned by a lower and an upper corner.

    The default box is empty: its lower corner is +inf and its upper corner
    is -inf, so merging anything into it yields that thing's bounds.
    """

    low: np.ndarray = field(default_factory=_empty_low)
    upper: np.ndarray = field(default_factory=_empty_upper)

    def __post_init__(self) -> None:
        self.low = np.array(self.low, dtype=np.float64).reshape(-1)
        self.upper = np.array(self.upper, dtype=np.float64).reshape(-1)
        if self.low.shape != self.upper.shape:
            raise ValueError(
                f"corner shapes differ: {self.low.shape} and {self.upper.shape}"
            )

    @classmethod
    def empty(cls, dim: int = 3) -> "AABB":
        """An empty box of the given dimension."""
        return cls(np.full(dim, math.inf), np.full(dim, -math.inf))

    @classmethod
    def from_points(cls, *args) -> "AABB":
        """Smallest box holding every given point."""
        if not args:
            raise ValueError("from_points needs at least one point")
        points = np.stack([np.asarray(p, dtype=np.float64) for p in args])
        return cls(points.min(axis=0), points.max(axis=0))

    @property
    def dim(self) -> int:
        return int(self.low.shape[0])

    def copy(self) -> "AABB":
        return AABB(self.low.copy(), self.upper.copy())

    def merged(self, other: "AABB") -> "AABB":
        """New box enclosing this box and ``other``."""
        return AABB(
            np.minimum(self.low, other.low), np.maximum(self.upper, other.upper)
        )

    def union_with(self, other: "AABB") -> None:
        """Grow this box in place to enclose ``other``."""
        self.low = np.minimum(self.low, other.low)
        self.upper = np.maximum(self.upper, other.upper)

    def union_point(self, point) -> None:
        """Grow this box in place to enclose ``point``."""
        p = np.asarray(point, dtype=np.float64)
        self.low = np.minimum(self.low, p)
        self.upper = np.maximum(self.upper, p)

    def center(self) -> np.ndarray:
        return (self.low + self.upper) / 2.0

    def extent(self) -> np.ndarray:
        return self.upper - self.low

    def volume(self) -> float:
        """Product of the side lengths."""
        return float(np.prod(self.extent()))

    def dist(self, dim: int) -> float:
        """Length of the side along axis ``dim``."""
        return float(self.upper[dim] - self.low[dim])

    def is_valid(self) -> bool:
        """True when no side has negative length."""
        return bool(np.all(self.extent() >= 0.0))

    def is_inside(self, point) -> bool:
        """Whether ``point`` lies in the box, faces included."""
        p = np.asarray(point, dtype=np.float64)
        return bool(np.all(p >= self.low) and np.all(p <= self.upper))

    def surface_area(self) -> float:
        """Surface area of a 3-D box; negative sides count as zero."""
        if self.dim != 3:
            raise ValueError("surface area is defined for 3-D boxes only")
        x, y, z = np.maximum(self.extent(), 0.0)
        return float((x * y + y * z + z * x) * 2.0)

    def to_string(self) -> str:
        return (
            "TAABB[\n"
            f"  low_bnd = {_format_vector(self.low)}\n"
            f"  upper_bnd = {_format_vector(self.upper)}\n"
            "]"
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AABB):
            return NotImplemented
        return bool(
            np.array_equal(self.low, other.low)
            and np.array_equal(self.upper, other.upper)
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"AABB(low={self.low.tolist()}, upper={self.upper.tolist()})"