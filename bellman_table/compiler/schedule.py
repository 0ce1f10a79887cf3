"""Relaxation schedule compiler.

Emits the straight-line body of ``relax_cells``: a simplified Bellman-Ford
over the visible window, unrolled at generation time so that the runtime
executes no loops except the bounded extra-rounds sweep.

Cell records live in four per-call lists indexed through the topology's
offset -> index map::

    loc[i]          position of the cell, None once it is off the map or occupied
    path_length[i]  shortest known path length from the origin
    cost[i]         cost of stepping onto the cell
    best_dir[i]     last step of the known route, pointing back into the origin

Invariant: ``best_dir`` is decided once, in the origin ring (squared
distance <= 2), as the unit step from the cell back to the origin. Every
farther cell COPIES the best direction of the neighbor it relaxes against;
it never recomputes a direction from the neighbor's position. Along any
chain of relaxations the value therefore stays the step that enters the
origin, and its opposite is the first move the agent should make. Taking
the direction towards the immediate neighbor instead would break the
chain and point the agent along the last leg of the route.
"""

from dataclasses import dataclass
from typing import List

from ..model.direction import Direction
from .emitter import SourceEmitter
from .topology import ORIGIN, ORIGIN_RING, Offset, Topology, nearest_initialized


# Names the emitted body relies on. The generator defines the constants at
# module level and passes ``host``/``origin``/``extra_rounds`` as parameters.
ORIGIN_COST_NAME = "ORIGIN_COST"
INITIAL_COST_NAME = "INITIAL_COST"
INITIAL_PATH_LENGTH_NAME = "INITIAL_PATH_LENGTH"
CELL_COUNT_NAME = "CELL_COUNT"


def initial_predecessors(offset: Offset) -> List[Offset]:
    """Neighbors already relaxed when ``offset`` is first visited (scan order)."""
    own = offset.distance_squared
    return [n for n in offset.neighbors() if 1 <= n.distance_squared < own]


def round_neighbors(offset: Offset, radius: int) -> List[Offset]:
    """Neighbors checked during an extra round: every one inside the window."""
    return [n for n in offset.neighbors() if 1 <= n.distance_squared <= radius]


@dataclass
class ScheduleStats:
    """Counts of emitted relaxation checks."""
    cells: int = 0
    ring_cells: int = 0
    initial_checks: int = 0
    round_checks: int = 0


class ScheduleCompiler:
    """
    Emits position resolution, validity checks and edge relaxation code.

    Call order matters: ``compile_declarations``, ``compile_positions``,
    ``compile_validity``, ``compile_initialization``, then
    ``compile_extra_rounds``. Every method walks the topology in distance
    order; none of them computes a path length itself.
    """

    def __init__(self, emitter: SourceEmitter, topology: Topology):
        self.emitter = emitter
        self.topology = topology
        self.stats = ScheduleStats(cells=len(topology))

    def _tag(self, offset: Offset) -> str:
        """Inline comment naming the offset of a cell."""
        if not self.emitter.comments_enabled:
            return ""
        return f"  # {offset}"

    def _loc(self, offset: Offset) -> str:
        if offset == ORIGIN:
            return "origin"
        return f"loc[{self.topology.index_of(offset)}]"

    def compile_declarations(self) -> None:
        """Allocate fresh cell lists; nothing carries over between calls."""
        e = self.emitter
        e.emit_line(
            f"loc = [None] * {CELL_COUNT_NAME}",
            f"path_length = [{INITIAL_PATH_LENGTH_NAME}] * {CELL_COUNT_NAME}",
            f"cost = [{INITIAL_COST_NAME}] * {CELL_COUNT_NAME}",
            f"best_dir = [Direction.CENTER] * {CELL_COUNT_NAME}",
        )
        e.blank_line()

    def compile_positions(self) -> None:
        """Step every cell's position out from an already resolved neighbor."""
        e = self.emitter
        e.emit_comment("Resolve positions outwards from the agent's own cell.")
        for i, offset in enumerate(self.topology):
            source = nearest_initialized(offset)
            step = source.direction_to(offset)
            e.emit_line(
                f"loc[{i}] = {self._loc(source)}.add(Direction.{step.name})"
                f"{self._tag(offset)}"
            )
        e.blank_line()

    def compile_validity(self) -> None:
        """Drop cells that are off the map or occupied; read the rest's cost."""
        e = self.emitter
        e.emit_comment("Invalidate cells that are off the map or occupied.")
        for i, offset in enumerate(self.topology):
            with e.block(f"if host.is_passable(loc[{i}]):{self._tag(offset)}"):
                e.emit_line(f"cost[{i}] = host.movement_cost(loc[{i}])")
            with e.block("else:"):
                e.emit_line(f"loc[{i}] = None")
        e.blank_line()

    def _emit_relaxation(self, i: int, neighbor: Offset) -> None:
        j = self.topology.index_of(neighbor)
        e = self.emitter
        with e.block(f"if path_length[{j}] + cost[{i}] < path_length[{i}]:"):
            e.emit_line(
                f"path_length[{i}] = path_length[{j}] + cost[{i}]",
                f"best_dir[{i}] = best_dir[{j}]",
            )

    def compile_initialization(self) -> None:
        """
        Emit the first relaxation pass.

        Ring cells connect straight to the origin. Farther cells only read
        strictly closer neighbors, all of which this pass has already
        visited. Only a strict improvement overwrites, so the first
        improving neighbor in scan order wins ties.
        """
        e = self.emitter
        e.emit_comment("Initial edge relaxation, closest cells first.")
        for i, offset in enumerate(self.topology):
            with e.block(f"if loc[{i}] is not None:{self._tag(offset)}"):
                if offset.distance_squared <= ORIGIN_RING:
                    back = offset.direction_to(ORIGIN)
                    e.emit_line(
                        f"path_length[{i}] = cost[{i}] + {ORIGIN_COST_NAME}",
                        f"best_dir[{i}] = Direction.{back.name}",
                    )
                    self.stats.ring_cells += 1
                    continue
                for neighbor in initial_predecessors(offset):
                    self._emit_relaxation(i, neighbor)
                    self.stats.initial_checks += 1
        e.blank_line()

    def compile_extra_rounds(self, bound: str = "extra_rounds") -> None:
        """
        Emit the one runtime loop: ``bound`` more sweeps over the window.

        Relaxation is in place, so an improvement found early in a sweep is
        already visible to later cells of the same sweep. Ring cells are
        skipped; their path through the origin cannot be beaten.
        """
        e = self.emitter
        e.emit_comment("Extra rounds of edge relaxation to route around obstacles.")

        def body() -> None:
            for i, offset in enumerate(self.topology):
                if offset.distance_squared <= ORIGIN_RING:
                    continue
                with e.block(f"if loc[{i}] is not None:{self._tag(offset)}"):
                    for neighbor in round_neighbors(offset, self.topology.radius):
                        self._emit_relaxation(i, neighbor)
                        self.stats.round_checks += 1

        e.emit_loop(bound, body)
        e.blank_line()

    def compile_indicators(self) -> None:
        """Emit debug dots colored by each valid cell's best direction."""
        e = self.emitter
        e.emit_comment("Debug indicators, one dot per valid cell.")
        for i, offset in enumerate(self.topology):
            with e.block(f"if loc[{i}] is not None:{self._tag(offset)}"):
                e.emit_line(
                    f"host.set_indicator_dot(loc[{i}], *INDICATOR_COLORS[best_dir[{i}]])"
                )
        e.blank_line()


# RGB colors of the debug indicator dots, by best direction.
INDICATOR_COLORS = {
    Direction.NORTH: (255, 0, 0),
    Direction.NORTHWEST: (0, 255, 0),
    Direction.WEST: (0, 0, 255),
    Direction.SOUTHWEST: (0, 0, 0),
    Direction.SOUTH: (255, 255, 0),
    Direction.SOUTHEAST: (255, 255, 255),
    Direction.EAST: (255, 0, 255),
    Direction.NORTHEAST: (0, 255, 255),
    Direction.CENTER: (128, 128, 128),
}
