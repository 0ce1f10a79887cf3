"""Absolute grid positions for the preview world."""

from dataclasses import dataclass
from typing import Tuple

from .direction import Direction


@dataclass(frozen=True)
class Location:
    """A cell on the map. y grows towards NORTH."""
    x: int
    y: int

    def add(self, direction: Direction) -> "Location":
        """The adjacent location one step in ``direction``."""
        return Location(self.x + direction.dx, self.y + direction.dy)

    def offset_to(self, other: "Location") -> Tuple[int, int]:
        """(dx, dy) from this location to ``other``."""
        return other.x - self.x, other.y - self.y

    def __str__(self) -> str:
        return f"[{self.x}, {self.y}]"
