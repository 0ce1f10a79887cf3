"""Preview agent: the host surface generated pathfinding code calls into."""

from typing import Dict, Tuple

from .direction import Direction
from .grid import GridMap
from .location import Location


class Agent:
    """
    A single unit walking the preview grid.

    Generated modules only ever call ``get_location``, ``is_passable``,
    ``movement_cost`` and, with indicators on, ``set_indicator_dot``.
    Movement cost is the step cost plus the rubble on the cell, which keeps
    it in the nominal [10, 110] range for rubble up to 100.
    """

    def __init__(self, agent_id: int, grid: GridMap,
                 position: Location, step_cost: int = 10):
        self.id = agent_id
        self.grid = grid
        self.position = position
        self.step_cost = step_cost
        self.steps_taken = 0
        self.indicator_dots: Dict[Location, Tuple[int, int, int]] = {}
        grid.place_agent(agent_id, position.x, position.y)

    def get_location(self) -> Location:
        return self.position

    def is_passable(self, location: Location) -> bool:
        """On the map, not a wall and not occupied."""
        return (self.grid.is_walkable(location.x, location.y)
                and not self.grid.is_occupied(location.x, location.y))

    def movement_cost(self, location: Location) -> int:
        return self.step_cost + self.grid.rubble_at(location.x, location.y)

    def set_indicator_dot(self, location: Location, r: int, g: int, b: int) -> None:
        self.indicator_dots[location] = (r, g, b)

    def can_move(self, direction: Direction) -> bool:
        if direction is Direction.CENTER:
            return False
        return self.is_passable(self.position.add(direction))

    def move(self, direction: Direction) -> bool:
        """Step in ``direction`` if the cell is free; return whether it moved."""
        if not self.can_move(direction):
            return False
        new_position = self.position.add(direction)
        self.grid.move_agent(self.id,
                             (self.position.x, self.position.y),
                             (new_position.x, new_position.y))
        self.position = new_position
        self.steps_taken += 1
        return True

    def __repr__(self) -> str:
        return f"Agent(id={self.id}, pos={self.position})"
