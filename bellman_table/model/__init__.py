"""Model package: directions, positions and the preview world."""

from .direction import Direction, COMPASS
from .location import Location
from .grid import GridMap
from .agent import Agent
from .state import CellSnapshot, FieldSnapshot, TickState

__all__ = [
    'Direction',
    'COMPASS',
    'Location',
    'GridMap',
    'Agent',
    'CellSnapshot',
    'FieldSnapshot',
    'TickState',
]
