"""Walk engine: drives a preview agent with a generated pathfinder."""

import types
from typing import List, Optional, Tuple, TYPE_CHECKING

from ..compiler.topology import Topology
from ..model.agent import Agent
from ..model.grid import GridMap
from ..model.location import Location
from ..model.state import CellSnapshot, FieldSnapshot, TickState
from .reference_field import ReferenceField

if TYPE_CHECKING:
    from ..config import PreviewConfig


def build_grid(config: "PreviewConfig") -> GridMap:
    """Create the preview grid with walls, rubble and blockers from config."""
    grid = GridMap(config.grid.width, config.grid.height)
    for wall_spec in config.layout.walls:
        if wall_spec.wall_type == "rectangle":
            grid.add_wall_rectangle(
                wall_spec.data['x'], wall_spec.data['y'],
                wall_spec.data['width'], wall_spec.data['height']
            )
        elif wall_spec.wall_type == "points":
            grid.add_wall_points(wall_spec.data['coords'])
    for rubble in config.layout.rubble:
        grid.add_rubble_rectangle(rubble.x, rubble.y,
                                  rubble.width, rubble.height, rubble.amount)
    # Blockers get ids after the walking agent
    for blocker_id, (x, y) in enumerate(config.layout.occupied, start=2):
        grid.place_agent(blocker_id, x, y)
    return grid


class WalkEngine:
    """
    Runs the generated pathfinding function once per tick.

    Each tick:
    1. Relax the window around the agent (kept for snapshots)
    2. Ask the pathfinding function for a move
    3. Move the agent if the cell is free
    4. Return the tick snapshot
    """

    def __init__(self, config: "PreviewConfig", pathfinder: types.ModuleType,
                 function_name: str = "pathfind_towards",
                 grid: Optional[GridMap] = None):
        self.config = config
        self.pathfinder = pathfinder
        self.pathfind = getattr(pathfinder, function_name)
        self.current_step = 0
        self.reached = False
        self.stalled = False

        self.grid = grid if grid is not None else build_grid(config)
        self.agent = Agent(1, self.grid, Location(*config.start), config.step_cost)
        self.target = Location(*config.target)

        # Offset of every cell index, inverted from the module's lookup table
        self.offsets: List[Tuple[int, int]] = [None] * pathfinder.CELL_COUNT
        for dx, column in pathfinder.CELL_INDEX.items():
            for dy, index in column.items():
                self.offsets[index] = (dx, dy)

        self.reference = ReferenceField(
            Topology.build(pathfinder.RADIUS), pathfinder.ORIGIN_COST
        )
        self.reference.compute(self.agent, self.agent.get_location())
        self.initial_field = self.snapshot_field()
        self.route: List[Tuple[int, int]] = [config.start]

    def snapshot_field(self) -> FieldSnapshot:
        """Relax the window around the agent and capture every cell."""
        origin = self.agent.get_location()
        loc, path_length, best_dir = self.pathfinder.relax_cells(
            self.agent, origin, self.config.extra_rounds
        )
        cells = [
            CellSnapshot(
                dx=dx, dy=dy,
                valid=loc[i] is not None,
                path_length=path_length[i],
                best_dir=best_dir[i]
            )
            for i, (dx, dy) in enumerate(self.offsets)
        ]
        return FieldSnapshot(origin=(origin.x, origin.y), cells=cells)

    def _recorded_length(self, field: FieldSnapshot) -> Optional[int]:
        origin = self.agent.get_location()
        if origin == self.target:
            return None
        dx, dy = self.pathfinder.clamp_offset(*origin.offset_to(self.target))
        return field.cells[self.pathfinder.cell_index(dx, dy)].path_length

    def step(self) -> TickState:
        """Execute one tick."""
        self.current_step += 1

        field = self.snapshot_field()
        path_length = self._recorded_length(field)
        move = self.pathfind(self.agent, self.target, self.config.extra_rounds)
        moved = self.agent.move(move)

        self.reached = self.agent.position == self.target
        if not moved and not self.reached:
            self.stalled = True
        else:
            self.route.append((self.agent.position.x, self.agent.position.y))

        return TickState(
            step=self.current_step,
            x=self.agent.position.x,
            y=self.agent.position.y,
            move=move,
            moved=moved,
            target=(self.target.x, self.target.y),
            path_length=path_length,
            reached=self.reached,
            field=field
        )

    def is_finished(self) -> bool:
        """Stop once the target is reached, the agent is stuck or time is up."""
        return (self.reached or self.stalled or
                self.current_step >= self.config.max_steps or
                self.agent.position == self.target)

    def get_summary(self) -> dict:
        return {
            'total_steps': self.current_step,
            'steps_taken': self.agent.steps_taken,
            'reached': self.reached or self.agent.position == self.target,
            'stalled': self.stalled,
            'optimality': self.reference.compare(self.initial_field),
        }
