"""Offset topology for a square grid seen from the agent's own cell.

Offsets are relative to an implicit origin (0, 0), the agent's current
position. Distances are squared ("r^2") throughout so that every comparison
stays integral.
"""

import math
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Tuple

from ..model.direction import Direction
from .errors import TopologyError


# Neighbor scan order used by both the fallback resolver and the relaxation
# schedule. It decides tie-breaks, so it must stay fixed.
NEIGHBOR_DELTAS: Tuple[Tuple[int, int], ...] = tuple(
    (di, dj)
    for di in (-1, 0, 1)
    for dj in (-1, 0, 1)
    if not (di == 0 and dj == 0)
)

# Cells this close are adjacent to the origin.
ORIGIN_RING = 2


@dataclass(frozen=True)
class Offset:
    """Integer displacement from the origin."""
    x: int
    y: int

    @property
    def distance_squared(self) -> int:
        return squared_distance(self.x, self.y)

    def neighbors(self) -> Iterator["Offset"]:
        """Yield the 8 grid-adjacent offsets in scan order."""
        for di, dj in NEIGHBOR_DELTAS:
            yield Offset(self.x + di, self.y + dj)

    def direction_to(self, other: "Offset") -> Direction:
        """Unit direction of a single step from this offset to an adjacent one."""
        return Direction.from_delta(other.x - self.x, other.y - self.y)

    def __str__(self) -> str:
        return f"({self.x},{self.y})"


ORIGIN = Offset(0, 0)


def squared_distance(x: int, y: int) -> int:
    """Squared distance from the origin to (x, y)."""
    return x * x + y * y


def _ceil_sqrt(value: int) -> int:
    root = math.isqrt(value)
    return root if root * root == value else root + 1


def enumerate_offsets(radius: int) -> List[Offset]:
    """
    List every offset with squared distance in [1, radius].

    Shells are visited by increasing squared distance; within a shell the
    scan runs over x, then y. The origin is never included.
    """
    if radius < 0:
        raise ValueError(f"Radius must be non-negative, got {radius}")

    offsets = []
    for d in range(1, radius + 1):
        r = _ceil_sqrt(d)
        for x in range(-r, r + 1):
            for y in range(-r, r + 1):
                if squared_distance(x, y) == d:
                    offsets.append(Offset(x, y))
    return offsets


def nearest_initialized(offset: Offset) -> Offset:
    """
    Return an offset whose position is resolved before this one.

    Cells next to the origin resolve straight from the agent's position.
    Farther cells use the first neighbor (scan order) that lies strictly
    closer to the origin, which the distance-ordered enumeration has
    already visited.
    """
    own = offset.distance_squared
    if own <= ORIGIN_RING:
        return ORIGIN

    for neighbor in offset.neighbors():
        if neighbor.distance_squared < own:
            return neighbor

    raise TopologyError(f"No initialized neighbor for offset {offset}")


@dataclass(frozen=True)
class Topology:
    """
    Distance-ordered offsets within a radius plus their cell indices.

    Index i of every generated cell list belongs to ``offsets[i]``.
    """
    radius: int
    offsets: Tuple[Offset, ...]
    index: Dict[Offset, int] = field(compare=False, repr=False)

    @classmethod
    def build(cls, radius: int) -> "Topology":
        offsets = tuple(enumerate_offsets(radius))
        return cls(
            radius=radius,
            offsets=offsets,
            index={offset: i for i, offset in enumerate(offsets)}
        )

    def __len__(self) -> int:
        return len(self.offsets)

    def __iter__(self) -> Iterator[Offset]:
        return iter(self.offsets)

    def __contains__(self, offset: object) -> bool:
        return offset in self.index

    def index_of(self, offset: Offset) -> int:
        return self.index[offset]

    def in_window(self, offset: Offset) -> bool:
        """True if the offset is a cell of this topology (origin excluded)."""
        return 1 <= offset.distance_squared <= self.radius
