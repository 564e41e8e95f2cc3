"""Small vector helpers and renderer-wide numeric constants."""

from __future__ import annotations

import math
from typing import Iterable, Union

import numpy as np

Number = Union[int, float]

FLOAT_INF = math.inf
FLOAT_MINUS_INF = -math.inf
FLOAT_EPSILON = float(np.finfo(np.float32).eps)

RAY_DEFAULT_MIN = 1e-4
RAY_DEFAULT_MAX = 1e7
PI = 3.14159265358979323846
INV_PI = 0.31830988618379067154
EPS = 1e-4
NORMAL_EPS = 1e-6

IDENTITY_MATRIX4 = np.identity(4, dtype=np.float64)


def vec(*args) -> np.ndarray:
    """Build a float vector from scalars or from a single iterable."""
    if len(args) == 1 and isinstance(args[0], Iterable):
        values = list(args[0])
    else:
        values = list(args)
    if not values:
        raise ValueError("a vector needs at least one component")
    return np.asarray(values, dtype=np.float64)


def dot(x, y) -> float:
    """Inner product of two vectors of the same size."""
    a = np.asarray(x, dtype=np.float64)
    b = np.asarray(y, dtype=np.float64)
    if a.shape != b.shape:
        raise ValueError(f"shape mismatch: {a.shape} and {b.shape}")
    return float(np.dot(a, b))


def cross(x, y) -> np.ndarray:
    """Cross product of two 3-vectors."""
    a = np.asarray(x, dtype=np.float64)
    b = np.asarray(y, dtype=np.float64)
    if a.shape != (3,) or b.shape != (3,):
        raise ValueError("cross product needs two 3-vectors")
    return np.cross(a, b)


def square_norm(x) -> float:
    """Squared Euclidean length."""
    return dot(x, x)


def norm(x) -> float:
    """Euclidean length."""
    return math.sqrt(square_norm(x))


def normalize(x) -> np.ndarray:
    """Vector scaled to unit length."""
    a = np.asarray(x, dtype=np.float64)
    return a / norm(a)


def all_close(x, y, eps: float = EPS) -> bool:
    """True when every component differs by strictly less than ``eps``."""
    a = np.asarray(x, dtype=np.float64)
    b = np.asarray(y, dtype=np.float64)
    if a.shape != b.shape:
        raise ValueError(f"shape mismatch: {a.shape} and {b.shape}")
    return bool(np.all(np.abs(a - b) < eps))


def sign(x: Number) -> int:
    """1 for non-negative values (zero included), -1 otherwise."""
    return 1 if x >= 0 else -1


def next_2_pow(n: int) -> int:
    """Smallest power of two that is not below ``n``."""
    if n < 1:
        raise ValueError("next_2_pow needs a positive integer")
    return 2 ** math.ceil(math.log2(n))


def _format_scalar(value) -> str:
    if isinstance(value, (bool, np.bool_)):
        return "1" if value else "0"
    if isinstance(value, (int, np.integer)):
        return str(int(value))
    return format(float(value), ".4g")


def to_string(value) -> str:
    """Format a scalar, vector or matrix with four significant digits.

    Vectors print as ``{a,b,c}``; matrices print as a brace list of their
    columns.
    """
    if np.isscalar(value):
        return _format_scalar(value)
    array = np.asarray(value)
    if array.ndim == 0:
        return _format_scalar(array.item())
    if array.ndim == 1:
        return "{" + ",".join(_format_scalar(v) for v in array.tolist()) + "}"
    if array.ndim == 2:
        return "{" + ",".join(to_string(column) for column in array.T) + "}"
    raise ValueError("only scalars, vectors and matrices can be formatted")