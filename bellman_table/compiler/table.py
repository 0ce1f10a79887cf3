"""Direction table compiler: (dx, dy) -> cell index lookup."""

from typing import Dict

from .emitter import SourceEmitter
from .errors import TopologyError
from .topology import Topology


def compile_direction_table(topology: Topology) -> Dict[int, Dict[int, int]]:
    """
    Group the topology's cells by x, then by y.

    Groups keep the order in which their first offset appears in the
    topology. The value is the cell index, so the table answers with
    whatever best direction the relaxation run stored for that cell.
    """
    if not len(topology):
        raise TopologyError(f"Radius {topology.radius} has no cells to look up")

    table: Dict[int, Dict[int, int]] = {}
    for offset in topology:
        table.setdefault(offset.x, {})[offset.y] = topology.index_of(offset)
    return table


def emit_direction_table(emitter: SourceEmitter,
                         table: Dict[int, Dict[int, int]],
                         name: str = "CELL_INDEX") -> None:
    """Render the table as a nested dict literal bound to ``name``."""
    emitter.emit_line(f"{name} = {{")
    emitter.enter_block()
    for x, column in table.items():
        entries = ", ".join(f"{y}: {index}" for y, index in column.items())
        emitter.emit_line(f"{x}: {{{entries}}},")
    emitter.exit_block()
    emitter.emit_line("}")
