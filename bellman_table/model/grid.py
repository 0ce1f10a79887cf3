"""Grid map for previewing generated pathfinding code."""

import numpy as np
from typing import Tuple, List, Set


class GridMap:
    """
    The 2D preview environment with wall, rubble and occupancy layers.

    Coordinate convention: (x, y) for API, [y, x] for array indexing.
    """

    def __init__(self, width: int, height: int):
        self.width = width
        self.height = height

        # Boolean mask: True = wall (impassable)
        self.walls = np.zeros((height, width), dtype=bool)

        # Extra movement cost on top of the step cost
        self.rubble = np.zeros((height, width), dtype=np.int32)

        # Occupancy: 0 = empty, positive int = agent/blocker id
        self.occupancy = np.zeros((height, width), dtype=np.int32)

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def add_wall_rectangle(self, x: int, y: int, w: int, h: int) -> None:
        """Mark rectangular region as wall."""
        # Clamp to grid boundaries
        x_end = min(x + w, self.width)
        y_end = min(y + h, self.height)
        x = max(0, x)
        y = max(0, y)
        self.walls[y:y_end, x:x_end] = True

    def add_wall_points(self, coords: List[Tuple[int, int]]) -> None:
        """Mark specific cells as walls."""
        for x, y in coords:
            if self.in_bounds(x, y):
                self.walls[y, x] = True

    def add_rubble_rectangle(self, x: int, y: int, w: int, h: int,
                             amount: int) -> None:
        """Raise the movement cost of a rectangular region."""
        x_end = min(x + w, self.width)
        y_end = min(y + h, self.height)
        x = max(0, x)
        y = max(0, y)
        self.rubble[y:y_end, x:x_end] = amount

    def is_walkable(self, x: int, y: int) -> bool:
        """Check if cell is within bounds and not a wall."""
        if not self.in_bounds(x, y):
            return False
        return not self.walls[y, x]

    def is_occupied(self, x: int, y: int) -> bool:
        """Check if cell contains an agent or blocker."""
        if not self.in_bounds(x, y):
            return True  # Out of bounds treated as occupied
        return self.occupancy[y, x] != 0

    def rubble_at(self, x: int, y: int) -> int:
        if not self.in_bounds(x, y):
            return 0
        return int(self.rubble[y, x])

    def place_agent(self, agent_id: int, x: int, y: int) -> None:
        """Place agent at position."""
        if self.in_bounds(x, y):
            self.occupancy[y, x] = agent_id

    def remove_agent(self, x: int, y: int) -> None:
        """Remove agent from position."""
        if self.in_bounds(x, y):
            self.occupancy[y, x] = 0

    def move_agent(self, agent_id: int,
                   from_pos: Tuple[int, int],
                   to_pos: Tuple[int, int]) -> None:
        """Atomically move agent from one cell to another."""
        self.remove_agent(*from_pos)
        self.place_agent(agent_id, *to_pos)

    def get_occupied_positions(self) -> Set[Tuple[int, int]]:
        """Return set of all occupied cell positions."""
        ys, xs = np.where(self.occupancy != 0)
        return {(int(x), int(y)) for x, y in zip(xs, ys)}
