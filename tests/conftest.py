"""Shared fixtures: generated pathfinders and small preview worlds."""

from functools import lru_cache
from pathlib import Path
from typing import Iterable, Optional, Tuple

import pytest

from bellman_table.compiler.generator import PathfinderGenerator
from bellman_table.config import GeneratorConfig
from bellman_table.export.source_writer import SourceWriter
from bellman_table.model.agent import Agent
from bellman_table.model.grid import GridMap
from bellman_table.model.location import Location
from bellman_table.preview.loader import load_pathfinder

CENTER = (20, 20)


def write_and_load(directory: Path, source: str, name: str):
    """Write generated source to ``directory`` and import it."""
    return load_pathfinder(SourceWriter(directory / f"{name}.py").write(source))


@pytest.fixture(scope="session")
def pathfinder(tmp_path_factory):
    """Factory returning the loaded module for a radius (cached per session)."""
    directory = tmp_path_factory.mktemp("generated")

    @lru_cache(maxsize=None)
    def load(radius: int, indicators: bool = False):
        config = GeneratorConfig(radius=radius, indicators=indicators)
        name = f"BMF{radius}_dots" if indicators else f"BMF{radius}"
        return write_and_load(directory, PathfinderGenerator(config).generate(), name)

    return load


def make_world(blocked: Iterable[Tuple[int, int]] = (),
               walls: Iterable[Tuple[int, int]] = (),
               rubble: Optional[dict] = None,
               step_cost: int = 10,
               size: int = 41) -> Agent:
    """Agent at the middle of an open grid; obstacles are given as offsets."""
    cx, cy = CENTER
    grid = GridMap(size, size)
    grid.add_wall_points([(cx + dx, cy + dy) for dx, dy in walls])
    for (dx, dy), amount in (rubble or {}).items():
        grid.add_rubble_rectangle(cx + dx, cy + dy, 1, 1, amount)
    for blocker_id, (dx, dy) in enumerate(blocked, start=2):
        grid.place_agent(blocker_id, cx + dx, cy + dy)
    return Agent(1, grid, Location(cx, cy), step_cost)


def cell(module, dx: int, dy: int) -> int:
    return module.cell_index(dx, dy)


def chebyshev(dx: int, dy: int) -> int:
    return max(abs(dx), abs(dy))
