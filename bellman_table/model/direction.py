"""Compass directions used by the generated pathfinding code."""

from enum import Enum


class Direction(Enum):
    """
    The 8 compass directions plus CENTER ("no movement").

    Values are (dx, dy) unit deltas; y grows towards NORTH.
    """
    NORTH = (0, 1)
    NORTHEAST = (1, 1)
    EAST = (1, 0)
    SOUTHEAST = (1, -1)
    SOUTH = (0, -1)
    SOUTHWEST = (-1, -1)
    WEST = (-1, 0)
    NORTHWEST = (-1, 1)
    CENTER = (0, 0)

    @property
    def dx(self) -> int:
        return self.value[0]

    @property
    def dy(self) -> int:
        return self.value[1]

    def opposite(self) -> "Direction":
        """Return the direction pointing the other way (CENTER stays CENTER)."""
        return Direction((-self.dx, -self.dy))

    @classmethod
    def from_delta(cls, dx: int, dy: int) -> "Direction":
        """Map a unit coordinate delta (each of -1, 0, 1) to its direction."""
        try:
            return cls((dx, dy))
        except ValueError:
            raise ValueError(f"Not a unit delta: ({dx}, {dy})") from None


# Moving directions in the order indicator colors and legends list them.
COMPASS = (
    Direction.NORTH,
    Direction.NORTHWEST,
    Direction.WEST,
    Direction.SOUTHWEST,
    Direction.SOUTH,
    Direction.SOUTHEAST,
    Direction.EAST,
    Direction.NORTHEAST,
)
