"""Tests for the generated pathfinding module and its runtime behavior."""

import ast
import math
from pathlib import Path

import pytest

from bellman_table import generate
from bellman_table.compiler.errors import GenerationError, TopologyError
from bellman_table.compiler.generator import PathfinderGenerator
from bellman_table.compiler.schedule import INDICATOR_COLORS
from bellman_table.compiler.topology import Offset, Topology
from bellman_table.config import CostConfig, GeneratorConfig, RuntimeConfig
from bellman_table.model.direction import Direction
from bellman_table.model.location import Location
from bellman_table.preview.reference_field import ReferenceField

from .conftest import CENTER, cell, chebyshev, make_world, write_and_load

U_WALL = [(-1, 1), (0, 1), (1, 1)]


def _relax(module, agent, rounds=0):
    return module.relax_cells(agent, agent.get_location(), rounds)


class TestGeneratedSource:
    def test_compiles_and_is_deterministic(self) -> None:
        source = generate(20)
        compile(source, "<BMF20>", "exec")
        assert generate(20) == source

    def test_exactly_one_runtime_loop(self) -> None:
        tree = ast.parse(generate(20))
        nodes = list(ast.walk(tree))
        assert sum(isinstance(n, ast.For) for n in nodes) == 1
        assert not any(isinstance(n, (ast.While, ast.comprehension)) for n in nodes)

    def test_comments_can_be_disabled(self) -> None:
        source = PathfinderGenerator(GeneratorConfig(radius=8, comments=False)).generate()
        assert "#" not in source
        assert '"""' not in source
        compile(source, "<BMF8>", "exec")

    def test_radius_override(self) -> None:
        config = GeneratorConfig(radius=5, comments=False)
        assert "RADIUS = 13" in generate(13, config)

    def test_result_carries_topology_and_table(self) -> None:
        result = PathfinderGenerator(GeneratorConfig(radius=8)).build()
        assert len(result.topology) == 24
        assert result.table[2][2] == result.topology.index_of(Offset(2, 2))
        assert result.line_count == result.source.count("\n")

    def test_custom_function_name_and_import(self, tmp_path: Path) -> None:
        config = GeneratorConfig(
            radius=5,
            runtime=RuntimeConfig(direction_import="bellman_table.model",
                                  function_name="pathfind_to")
        )
        module = write_and_load(tmp_path, PathfinderGenerator(config).generate(), "custom")
        assert hasattr(module, "pathfind_to")
        assert not hasattr(module, "pathfind_towards")


class TestGenerationErrors:
    def test_empty_topology_aborts(self) -> None:
        with pytest.raises(TopologyError):
            generate(0)

    def test_sentinel_must_exceed_longest_path(self) -> None:
        config = GeneratorConfig(radius=8,
                                 costs=CostConfig(initial_path_length=1000))
        with pytest.raises(GenerationError):
            PathfinderGenerator(config).build()


class TestLookup:
    def test_cell_index_miss_raises(self, pathfinder) -> None:
        module = pathfinder(8)
        with pytest.raises(LookupError):
            module.cell_index(3, 0)
        with pytest.raises(LookupError):
            module.cell_index(0, 0)

    @pytest.mark.parametrize("offset,expected", [
        ((10, 0), (2, 0)),
        ((0, -10), (0, -2)),
        ((1, 10), (0, 2)),
        ((-3, -3), (-2, -2)),
        ((2, 2), (2, 2)),
    ])
    def test_clamp_offset(self, pathfinder, offset, expected) -> None:
        assert pathfinder(8).clamp_offset(*offset) == expected

    def test_clamp_never_returns_origin(self, pathfinder) -> None:
        module = pathfinder(1)
        assert module.clamp_offset(5, 5) == (1, 0)
        assert module.clamp_offset(-2, -7) == (0, -1)

    @pytest.mark.parametrize("radius", [1, 2, 8, 20])
    def test_clamped_offsets_always_hit_the_table(self, pathfinder, radius) -> None:
        module = pathfinder(radius)
        for dx in range(-15, 16):
            for dy in range(-15, 16):
                if dx == 0 and dy == 0:
                    continue
                cx, cy = module.clamp_offset(dx, dy)
                assert 1 <= cx * cx + cy * cy <= radius
                module.cell_index(cx, cy)
                if dx * dx + dy * dy <= radius:
                    assert (cx, cy) == (dx, dy)


class TestObstacleFreeRelaxation:
    def test_single_pass_is_optimal(self, pathfinder) -> None:
        module = pathfinder(8)
        loc, path_length, best_dir = _relax(module, make_world())
        for offset in Topology.build(8):
            i = cell(module, offset.x, offset.y)
            assert loc[i] == Location(CENTER[0] + offset.x, CENTER[1] + offset.y)
            assert path_length[i] == 10 + 10 * chebyshev(offset.x, offset.y)

    def test_ring_points_back_to_origin(self, pathfinder) -> None:
        module = pathfinder(8)
        _, path_length, best_dir = _relax(module, make_world())
        i = cell(module, 1, 0)
        assert path_length[i] == 20
        assert best_dir[i] is Direction.WEST

    def test_target_two_two_moves_northeast(self, pathfinder) -> None:
        module = pathfinder(8)
        agent = make_world()
        _, _, best_dir = _relax(module, agent, rounds=0)
        assert best_dir[cell(module, 2, 2)] is Direction.SOUTHWEST

        target = Location(CENTER[0] + 2, CENTER[1] + 2)
        assert module.pathfind_towards(agent, target, 0) is Direction.NORTHEAST

    def test_extra_rounds_change_nothing_when_optimal(self, pathfinder) -> None:
        module = pathfinder(20)
        agent = make_world()
        _, first_lengths, first_dirs = _relax(module, agent, rounds=0)
        _, lengths, dirs = _relax(module, agent, rounds=3)
        assert lengths == first_lengths
        assert dirs == first_dirs

    @pytest.mark.parametrize("offset", list(Topology.build(8)))
    def test_following_moves_reaches_target_in_recorded_steps(
            self, pathfinder, offset: Offset) -> None:
        module = pathfinder(8)
        agent = make_world()
        _, path_length, _ = _relax(module, agent)
        recorded = path_length[cell(module, offset.x, offset.y)]
        expected_steps = (recorded - module.ORIGIN_COST) // agent.step_cost

        target = Location(CENTER[0] + offset.x, CENTER[1] + offset.y)
        steps = 0
        while agent.get_location() != target and steps <= expected_steps:
            assert agent.move(module.pathfind_towards(agent, target, 0))
            steps += 1
        assert agent.get_location() == target
        assert steps == expected_steps == chebyshev(offset.x, offset.y)

    def test_at_target_returns_center(self, pathfinder) -> None:
        agent = make_world()
        module = pathfinder(8)
        assert module.pathfind_towards(agent, agent.get_location(), 0) is Direction.CENTER

    def test_far_target_first_move_heads_towards_it(self, pathfinder) -> None:
        agent = make_world()
        move = pathfinder(8).pathfind_towards(
            agent, Location(CENTER[0] + 30, CENTER[1]), 0)
        assert move.dx == 1


class TestObstacles:
    def test_occupied_cell_is_excluded(self, pathfinder) -> None:
        module = pathfinder(8)
        agent = make_world(blocked=[(0, 1)])
        loc, path_length, best_dir = _relax(module, agent, rounds=1)
        i = cell(module, 0, 1)
        assert loc[i] is None
        assert path_length[i] == module.INITIAL_PATH_LENGTH

    def test_routes_around_occupied_cell_north(self, pathfinder) -> None:
        module = pathfinder(8)
        agent = make_world(blocked=[(0, 1)])
        _, path_length, best_dir = _relax(module, agent, rounds=1)
        i = cell(module, 0, 2)
        assert best_dir[i].opposite() is not Direction.NORTH
        assert best_dir[i].opposite() in (Direction.NORTHWEST, Direction.NORTHEAST)
        assert path_length[i] == 30

    def test_occupied_target_yields_center(self, pathfinder) -> None:
        agent = make_world(blocked=[(2, 0)])
        target = Location(CENTER[0] + 2, CENTER[1])
        assert pathfinder(8).pathfind_towards(agent, target, 2) is Direction.CENTER

    def test_detour_needs_extra_rounds(self, pathfinder) -> None:
        module = pathfinder(8)
        agent = make_world(walls=U_WALL)
        i = cell(module, 0, 2)

        _, path_length, _ = _relax(module, agent, rounds=0)
        assert path_length[i] == module.INITIAL_PATH_LENGTH

        _, path_length, best_dir = _relax(module, agent, rounds=module.CELL_COUNT)
        assert path_length[i] == 50
        assert best_dir[i].opposite() in (Direction.WEST, Direction.EAST)

    def test_more_rounds_never_lengthen_paths(self, pathfinder) -> None:
        module = pathfinder(8)
        agent = make_world(walls=U_WALL, rubble={(2, 0): 60, (-2, -1): 30})
        previous = None
        for rounds in range(5):
            _, lengths, _ = _relax(module, agent, rounds)
            if previous is not None:
                assert all(a <= b for a, b in zip(lengths, previous))
            previous = lengths

    @pytest.mark.parametrize("radius", [8, 13])
    def test_enough_rounds_match_exact_field(self, pathfinder, radius) -> None:
        module = pathfinder(radius)
        agent = make_world(walls=U_WALL + [(2, -1), (2, 0)],
                           rubble={(-2, 1): 80, (1, -2): 45, (0, 2): 20})
        loc, path_length, _ = _relax(module, agent, rounds=module.CELL_COUNT)

        reference = ReferenceField(Topology.build(radius), module.ORIGIN_COST)
        field = reference.compute(agent, agent.get_location())
        for offset, exact in field.items():
            i = cell(module, offset.x, offset.y)
            if loc[i] is None:
                continue
            if math.isinf(exact):
                assert path_length[i] == module.INITIAL_PATH_LENGTH
            else:
                assert path_length[i] == exact


class TestIndicators:
    def test_dots_colored_by_best_direction(self, pathfinder) -> None:
        module = pathfinder(8, True)
        agent = make_world(blocked=[(1, 1)])
        _relax(module, agent)
        assert len(agent.indicator_dots) == 23
        east = Location(CENTER[0] + 1, CENTER[1])
        assert agent.indicator_dots[east] == INDICATOR_COLORS[Direction.WEST]
