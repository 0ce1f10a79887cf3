"""Preview package: run generated pathfinders against a reference world."""

from .loader import load_pathfinder
from .reference_field import ReferenceField
from .engine import WalkEngine, build_grid

__all__ = ['load_pathfinder', 'ReferenceField', 'WalkEngine', 'build_grid']
