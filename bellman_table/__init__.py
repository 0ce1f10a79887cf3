"""Static pathfinding table compiler for grid agents with a fixed vision radius."""

from .compiler import generate, PathfinderGenerator, GenerationError

__all__ = ['generate', 'PathfinderGenerator', 'GenerationError']
