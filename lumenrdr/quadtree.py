"""Directional quad tree that learns a 2-D sampling density from samples."""

from __future__ import annotations

import math
from bisect import bisect_right
from dataclasses import dataclass, field
from typing import Iterator, Protocol

import numpy as np

from lumenrdr.aabb import AABB
from lumenrdr.properties import RenderError
from lumenrdr.vecmath import EPS

INVALID_INDEX = -1
SPLIT_RATIO = 0.01


def gamma_correction(value: float) -> float:
    """Undo the sRGB transfer curve in the form the tree's filter uses."""
    if value <= 0.04045:
        return value / 12.92
    return (value + 0.055 / 1.055) ** 2.4


def xyz_to_lab_helper(value: float) -> float:
    """The non-linear part of the XYZ to CIELAB conversion."""
    if value > 0.008856:
        return value ** (1.0 / 3.0)
    return 7.787 * value + 16.0 / 116.0


def rgb_to_cielab_lightness(rgb) -> float:
    """CIELAB lightness ``L*`` of an RGB colour."""
    r, g, b = (gamma_correction(float(c)) for c in np.asarray(rgb, dtype=np.float64))
    y = r * 0.2126729 + g * 0.7151522 + b * 0.0721750
    return 116.0 * xyz_to_lab_helper(y) - 16.0


class _RandomSource(Protocol):
    def random(self) -> float: ...


def _sample_discrete(weights: list[float], u: float) -> tuple[int, float]:
    """Pick an index proportionally to ``weights``; return it with its pmf."""
    n = len(weights)
    total = sum(weights)
    if total <= 0.0:
        return min(int(u * n), n - 1), 1.0 / n
    cdf = []
    running = 0.0
    for w in weights:
        running += w
        cdf.append(running)
    index = min(bisect_right(cdf, u * total), n - 1)
    while weights[index] <= 0.0 and index > 0:
        index -= 1
    return index, weights[index] / total


@dataclass
class QuadNode:
    """A node of the quad tree; children are ordered LB, RB, LT, RT."""

    is_leaf: bool
    weight: float
    bound: AABB
    flux: np.ndarray = field(default_factory=lambda: np.zeros(3))
    children: list[int] = field(default_factory=lambda: [INVALID_INDEX] * 4)


def _child(point, bound: AABB) -> int:
    center = bound.center()
    x_bit = 1 if point[0] >= center[0] else 0
    y_bit = 1 if point[1] >= center[1] else 0
    return x_bit | (y_bit << 1)


class DirectionalQuadTree:
    """Adaptive quad tree over the unit square.

    Committed samples add their filtered lightness to every node on the path
    to their leaf; ``split_or_prune`` refines nodes that hold a large share
    of the total weight and collapses those that hold little.
    """

    def __init__(self, filter_power: float = 1.0) -> None:
        self.filter_power = filter_power
        self.root_index = 0
        self.nodes: list[QuadNode] = [
            QuadNode(True, 0.0, AABB(np.zeros(2), np.ones(2)))
        ]

    @property
    def total_weight(self) -> float:
        return self.nodes[self.root_index].weight

    def leaf_indices(self) -> Iterator[int]:
        """Indices of the leaves reachable from the root."""
        stack = [self.root_index]
        while stack:
            index = stack.pop()
            node = self.nodes[index]
            if node.is_leaf:
                yield index
            else:
                stack.extend(reversed(node.children))

    def find_leaf(self, point, node_index: int | None = None) -> int:
        """Index of the leaf below ``node_index`` (default: root) holding ``point``."""
        index = self.root_index if node_index is None else node_index
        if index < 0 or index >= len(self.nodes):
            raise RenderError(f"invalid node index {index}")
        while True:
            node = self.nodes[index]
            if node.is_leaf:
                return index
            index = node.children[_child(point, node.bound)]

    def commit(self, point, weight) -> None:
        """Record a sample of RGB ``weight`` arriving at ``point``."""
        weight = np.asarray(weight, dtype=np.float64)
        leaf = self.nodes[self.find_leaf(point)]
        leaf_volume = leaf.bound.volume()
        filtered = np.power(weight, self.filter_power)
        inc = rgb_to_cielab_lightness(filtered) * leaf_volume

        index = self.root_index
        while True:
            node = self.nodes[index]
            node.weight += inc
            if node.is_leaf:
                node.flux = node.flux + leaf_volume * weight
                return
            index = node.children[_child(point, node.bound)]

    def pdf(self, point) -> float:
        """Density of sampling ``point`` under the learned distribution."""
        total = self.total_weight
        if total <= 0.0:
            raise RenderError("quad tree holds no weight")
        leaf = self.nodes[self.find_leaf(point)]
        return leaf.weight / total / leaf.bound.volume()

    def split_or_prune(self, split_ratio: float = SPLIT_RATIO) -> None:
        """Split nodes holding at least ``split_ratio`` of the total weight
        and collapse the others into leaves."""
        if split_ratio <= 0.0:
            raise ValueError("split_ratio must be positive")
        if self.total_weight <= 0.0:
            raise RenderError("quad tree holds no weight")
        self._split_or_prune(self.root_index, split_ratio)

    def _split_or_prune(self, index: int, split_ratio: float) -> None:
        total = self.total_weight
        node = self.nodes[index]
        node_weight = node.weight

        if node_weight < split_ratio * total:
            if not node.is_leaf:
                node.children = [INVALID_INDEX] * 4
                node.is_leaf = True
            return

        if node.is_leaf:
            node.is_leaf = False
            low = node.bound.low.copy()
            upper = node.bound.upper.copy()
            center = (low + upper) / 2.0
            ustep = np.array([center[0] - low[0], 0.0])
            vstep = np.array([0.0, upper[1] - center[1]])
            child_weight = node_weight / 4.0
            child_flux = node.flux / 4.0
            corners = [
                (low, center),
                (low + ustep, center + ustep),
                (low + vstep, center + vstep),
                (center, upper),
            ]
            first = len(self.nodes)
            for lo, hi in corners:
                self.nodes.append(
                    QuadNode(True, child_weight, AABB(lo, hi), child_flux.copy())
                )
            node.children = [first, first + 1, first + 2, first + 3]

        for child_index in list(node.children):
            self._split_or_prune(child_index, split_ratio)

    def sample(self, rng: _RandomSource) -> tuple[np.ndarray, float, int]:
        """Draw a point; return ``(point, pdf, leaf_index)``.

        A leaf is chosen by descending with probabilities proportional to the
        child weights; the point is drawn from the lower-left quarter of it.
        """
        index = self.root_index
        pmf = 1.0
        while True:
            node = self.nodes[index]
            if node.is_leaf:
                low = node.bound.low
                upper = node.bound.upper
                center = (low + upper) / 2.0
                ustep = np.array([center[0] - low[0], 0.0])
                vstep = np.array([0.0, upper[1] - center[1]])
                u = rng.random()
                v = rng.random()
                point = low + u * ustep + v * vstep
                return point, pmf / node.bound.volume(), index
            weights = [self.nodes[c].weight for c in node.children]
            choice, local_pmf = _sample_discrete(weights, rng.random())
            pmf *= local_pmf
            index = node.children[choice]

    def sanity_check(self) -> None:
        """Raise ``RenderError`` when the tree's invariants do not hold."""
        self._sanity_check(self.root_index)

    def _sanity_check(self, index: int) -> None:
        node = self.nodes[index]
        if not node.is_leaf:
            total = 0.0
            for child_index in node.children:
                if child_index == INVALID_INDEX or child_index >= len(self.nodes):
                    raise RenderError(f"node {index} has an invalid child")
                total += self.nodes[child_index].weight
                self._sanity_check(child_index)
            if not math.isclose(node.weight, total, rel_tol=1e-9, abs_tol=EPS):
                raise RenderError(f"node {index} weight differs from its children")
            return
        if node.weight < 0.0:
            raise RenderError(f"leaf {index} has negative weight")
        if not node.weight < SPLIT_RATIO * self.total_weight:
            raise RenderError(f"leaf {index} holds too much weight")