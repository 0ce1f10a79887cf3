"""Exact shortest-path field over the visible window, for comparison."""

import numpy as np
from typing import Dict, List, Tuple, Any
from scipy.sparse import csr_matrix
from scipy.sparse.csgraph import dijkstra

from ..compiler.schedule import round_neighbors
from ..compiler.topology import ORIGIN, ORIGIN_RING, Offset, Topology, nearest_initialized
from ..model.state import FieldSnapshot


class ReferenceField:
    """
    Dijkstra over the same graph the generated code relaxes.

    Nodes are the origin plus every valid cell of the window; stepping onto
    a cell costs that cell's movement cost and the origin starts at the
    origin cost. With enough extra rounds the generated path lengths must
    equal this field exactly.
    """

    def __init__(self, topology: Topology, origin_cost: int = 10):
        self.topology = topology
        self.origin_cost = origin_cost
        self.field: Dict[Offset, float] = {}

    def compute(self, host: Any, origin: Any) -> Dict[Offset, float]:
        """Compute the field around ``origin`` using the host's cells."""
        offsets = self.topology.offsets
        n = len(offsets) + 1  # node 0 is the origin

        # Positions are stepped out the same way the generated code does it
        positions = {ORIGIN: origin}
        valid: List[bool] = []
        costs: List[int] = []
        for offset in offsets:
            source = nearest_initialized(offset)
            location = positions[source].add(source.direction_to(offset))
            positions[offset] = location
            ok = host.is_passable(location)
            valid.append(ok)
            costs.append(host.movement_cost(location) if ok else 0)

        rows, cols, weights = [], [], []
        for i, offset in enumerate(offsets):
            if not valid[i]:
                continue
            if offset.distance_squared <= ORIGIN_RING:
                rows.append(0)
                cols.append(i + 1)
                weights.append(costs[i])
            for neighbor in round_neighbors(offset, self.topology.radius):
                j = self.topology.index_of(neighbor)
                if valid[j]:
                    rows.append(j + 1)
                    cols.append(i + 1)
                    weights.append(costs[i])

        graph = csr_matrix(
            (np.array(weights, dtype=np.float64), (rows, cols)), shape=(n, n)
        )
        dist = dijkstra(graph, directed=True, indices=0)

        self.field = {
            offset: float(dist[i + 1] + self.origin_cost)
            for i, offset in enumerate(offsets)
        }
        return self.field

    def compare(self, snapshot: FieldSnapshot) -> Dict[str, float]:
        """Count generated cells whose path length matches the exact field."""
        compared = 0
        optimal = 0
        worst_excess = 0.0
        for cell in snapshot.cells:
            exact = self.field.get(Offset(cell.dx, cell.dy), np.inf)
            if not cell.valid or not np.isfinite(exact):
                continue
            compared += 1
            excess = cell.path_length - exact
            if excess == 0:
                optimal += 1
            worst_excess = max(worst_excess, excess)
        return {
            'compared': compared,
            'optimal': optimal,
            'worst_excess': worst_excess,
        }

    def unreachable(self) -> List[Tuple[int, int]]:
        return [(o.x, o.y) for o, d in self.field.items() if not np.isfinite(d)]
