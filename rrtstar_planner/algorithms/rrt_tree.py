import math
import typing as t
from dataclasses import dataclass

import numpy as np

from rrtstar_planner.data_models import Position2D

ROOT_PARENT = -1


@dataclass
class Vertex:
    x: float
    y: float
    # Distance to the parent vertex, not the cumulative cost
    cost: float = 0.0
    parent: int = ROOT_PARENT

    @property
    def position(self) -> Position2D:
        return (self.x, self.y)

    def distance_to(self, x: float, y: float) -> float:
        return math.hypot(self.x - x, self.y - y)


class RRTTree:
    """
    Arena of vertices for a single planning call. Vertices are addressed by their insertion
    index and parents are stored as indices, `ROOT_PARENT` for the root.

    Positions are mirrored in a preallocated numpy buffer so nearest-neighbor and radius
    queries are vectorized linear scans.
    """

    def __init__(self, capacity: int = 1000):
        self.vertices: t.List[Vertex] = []
        self._xy = np.empty((max(capacity, 1), 2), dtype=np.float64)

    def clear(self, capacity: int | None = None):
        self.vertices = []
        if capacity is not None:
            self._xy = np.empty((max(capacity, 1), 2), dtype=np.float64)

    def __len__(self):
        return len(self.vertices)

    def __getitem__(self, index: int) -> Vertex:
        return self.vertices[index]

    def __iter__(self):
        return iter(self.vertices)

    @property
    def positions(self) -> np.ndarray:
        return self._xy[: len(self.vertices)]

    def add(
        self, x: float, y: float, parent: int = ROOT_PARENT, cost: float = 0.0
    ) -> int:
        if parent != ROOT_PARENT and not 0 <= parent < len(self.vertices):
            raise IndexError("Parent index {} is not in the tree".format(parent))
        index = len(self.vertices)
        if index >= self._xy.shape[0]:
            self._xy = np.concatenate([self._xy, np.empty_like(self._xy)])
        self._xy[index] = (x, y)
        self.vertices.append(Vertex(x=x, y=y, cost=cost, parent=parent))
        return index

    def set_parent(self, index: int, parent: int, cost: float):
        self.vertices[index].parent = parent
        self.vertices[index].cost = cost

    def distances_to(self, x: float, y: float) -> np.ndarray:
        positions = self.positions
        return np.hypot(positions[:, 0] - x, positions[:, 1] - y)

    def nearest(self, x: float, y: float) -> int:
        """Index of the vertex closest to (x, y); ties go to the earliest inserted vertex."""
        if not self.vertices:
            raise ValueError("Cannot query the nearest vertex of an empty tree")
        return int(np.argmin(self.distances_to(x, y)))

    def within_radius(self, x: float, y: float, radius: float) -> t.List[int]:
        if not self.vertices:
            return []
        return np.nonzero(self.distances_to(x, y) <= radius)[0].tolist()

    def ancestry(self, index: int) -> t.List[int]:
        """Indices from `index` up to the root, inclusive"""
        chain = []
        while index != ROOT_PARENT:
            chain.append(index)
            if len(chain) > len(self.vertices):
                raise RuntimeError("Cycle detected in the parent links of the tree")
            index = self.vertices[index].parent
        return chain

    def cost_from_root(self, index: int) -> float:
        return sum(self.vertices[i].cost for i in self.ancestry(index))
