"""Generator entry point: radius in, self-contained pathfinding module out."""

from dataclasses import dataclass, replace
from typing import Dict, Optional

from ..config import GeneratorConfig
from .emitter import SourceEmitter
from .errors import GenerationError, TopologyError
from .schedule import INDICATOR_COLORS, ScheduleCompiler, ScheduleStats
from .table import compile_direction_table, emit_direction_table
from .topology import Topology


@dataclass
class GenerationResult:
    """Everything produced by one generator run."""
    source: str
    topology: Topology
    table: Dict[int, Dict[int, int]]
    stats: ScheduleStats

    @property
    def line_count(self) -> int:
        return self.source.count("\n")


class PathfinderGenerator:
    """
    Compiles a pathfinding module for one vision radius.

    The module exposes ``relax_cells``, ``cell_index``, ``clamp_offset`` and
    the pathfinding function (``pathfind_towards`` unless configured
    otherwise). Generation is all-or-nothing: any failure raises a
    ``GenerationError`` before a source string exists.

    The unreachable sentinel is only safe while every host movement cost
    stays within ``costs.initial_cost``.
    """

    def __init__(self, config: GeneratorConfig):
        self.config = config

    def _check(self, topology: Topology) -> None:
        if not len(topology):
            raise TopologyError(
                f"Radius {self.config.radius} produces an empty topology"
            )
        costs = self.config.costs
        worst = costs.origin_cost + len(topology) * costs.initial_cost
        if costs.initial_path_length <= worst:
            raise GenerationError(
                f"Initial path length {costs.initial_path_length} must exceed "
                f"the longest possible path ({worst})"
            )

    def build(self) -> GenerationResult:
        """Run every compiler stage and return the rendered module."""
        topology = Topology.build(self.config.radius)
        self._check(topology)

        emitter = SourceEmitter()
        emitter.set_comments_enabled(self.config.comments)
        schedule = ScheduleCompiler(emitter, topology)
        table = compile_direction_table(topology)

        self._emit_header(emitter, topology)
        emit_direction_table(emitter, table)
        emitter.blank_line()
        if self.config.indicators:
            self._emit_indicator_colors(emitter)
        emitter.blank_line()
        self._emit_cell_index(emitter)
        self._emit_clamp_offset(emitter)
        self._emit_relax_cells(emitter, schedule)
        self._emit_pathfind(emitter)

        return GenerationResult(
            source=emitter.render(),
            topology=topology,
            table=table,
            stats=schedule.stats
        )

    def generate(self) -> str:
        return self.build().source

    def _emit_header(self, e: SourceEmitter, topology: Topology) -> None:
        runtime = self.config.runtime
        costs = self.config.costs
        e.emit_docstring(
            f"Pathfinding for a vision radius of {self.config.radius} r^2 "
            f"using a simplified Bellman-Ford.",
            "",
            "Generated by bellman_table; do not edit by hand.",
        )
        e.blank_line()
        e.emit_line("import math")
        e.blank_line()
        if runtime.direction_class == "Direction":
            e.emit_line(f"from {runtime.direction_import} import Direction")
        else:
            e.emit_line(
                f"from {runtime.direction_import} import "
                f"{runtime.direction_class} as Direction"
            )
        e.blank_line()
        e.emit_line(
            f"RADIUS = {self.config.radius}",
            f"CELL_COUNT = {len(topology)}",
            f"ORIGIN_COST = {costs.origin_cost}",
            f"INITIAL_COST = {costs.initial_cost}",
            f"INITIAL_PATH_LENGTH = {costs.initial_path_length}",
        )
        e.blank_line()
        e.emit_comment("Cell index of every visible offset, keyed by dx then dy.")

    def _emit_indicator_colors(self, e: SourceEmitter) -> None:
        e.emit_line("INDICATOR_COLORS = {")
        e.enter_block()
        for direction, rgb in INDICATOR_COLORS.items():
            e.emit_line(f"Direction.{direction.name}: {rgb},")
        e.exit_block()
        e.emit_line("}")
        e.blank_line()

    def _emit_cell_index(self, e: SourceEmitter) -> None:
        with e.block("def cell_index(dx, dy):"):
            e.emit_docstring(
                "Cell index of offset (dx, dy).",
                "",
                "Raises LookupError for offsets outside the window; callers",
                "must clamp the target first.",
            )
            with e.block("try:"):
                e.emit_line("return CELL_INDEX[dx][dy]")
            with e.block("except KeyError:"):
                e.emit_line(
                    'raise LookupError('
                    '"Offset ({}, {}) is outside vision radius {}".format('
                    'dx, dy, RADIUS)) from None'
                )
        e.blank_line()
        e.blank_line()

    def _emit_clamp_offset(self, e: SourceEmitter) -> None:
        with e.block("def clamp_offset(dx, dy):"):
            e.emit_docstring(
                "Pull an offset outside the window back inside it.",
                "",
                "The result lies on the segment towards (dx, dy), rounded",
                "towards the origin, and is never (0, 0).",
            )
            e.emit_line("d2 = dx * dx + dy * dy")
            with e.block("if d2 <= RADIUS:"):
                e.emit_line("return dx, dy")
            e.emit_line(
                "cx = math.isqrt(dx * dx * RADIUS // d2)",
                "cy = math.isqrt(dy * dy * RADIUS // d2)",
            )
            with e.block("if dx < 0:"):
                e.emit_line("cx = -cx")
            with e.block("if dy < 0:"):
                e.emit_line("cy = -cy")
            with e.block("if cx == 0 and cy == 0:"):
                e.emit_comment("Too close to the axis to round; step along the longer one.")
                with e.block("if abs(dx) >= abs(dy):"):
                    e.emit_line("cx = 1 if dx > 0 else -1")
                with e.block("else:"):
                    e.emit_line("cy = 1 if dy > 0 else -1")
            e.emit_line("return cx, cy")
        e.blank_line()
        e.blank_line()

    def _emit_relax_cells(self, e: SourceEmitter, schedule: ScheduleCompiler) -> None:
        with e.block("def relax_cells(host, origin, extra_rounds):"):
            e.emit_docstring(
                "Run the unrolled Bellman-Ford around ``origin``.",
                "",
                "Returns the per-cell lists (loc, path_length, best_dir).",
                "best_dir holds the step that enters the origin at the end of",
                "the known route; its opposite is the first move towards the cell.",
            )
            schedule.compile_declarations()
            schedule.compile_positions()
            schedule.compile_validity()
            schedule.compile_initialization()
            schedule.compile_extra_rounds("extra_rounds")
            if self.config.indicators:
                schedule.compile_indicators()
            e.emit_line("return loc, path_length, best_dir")
        e.blank_line()
        e.blank_line()

    def _emit_pathfind(self, e: SourceEmitter) -> None:
        name = self.config.runtime.function_name
        with e.block(f"def {name}(host, target, extra_rounds=0):"):
            e.emit_docstring(
                "Direction to move in to get closer to ``target``.",
                "",
                "host          the agent; its location is the origin",
                "target        position to pathfind towards",
                "extra_rounds  edge-relaxation sweeps beyond the first pass",
            )
            e.emit_line("origin = host.get_location()")
            with e.block("if target.x == origin.x and target.y == origin.y:"):
                e.emit_line("return Direction.CENTER")
            e.emit_line(
                "dx, dy = clamp_offset(target.x - origin.x, target.y - origin.y)",
                "loc, path_length, best_dir = relax_cells(host, origin, extra_rounds)",
            )
            e.emit_comment("best_dir is seen from the cell; the move is its opposite.")
            e.emit_line("return best_dir[cell_index(dx, dy)].opposite()")


def generate(radius: int, config: Optional[GeneratorConfig] = None) -> str:
    """Generate the pathfinding module source for ``radius``."""
    if config is None:
        config = GeneratorConfig(radius=radius)
    else:
        config = replace(config, radius=radius)
    return PathfinderGenerator(config).generate()
