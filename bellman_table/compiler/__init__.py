"""Compiler package: topology, relaxation schedule and lookup table."""

from .errors import GenerationError, TopologyError, EmitterError
from .topology import Offset, Topology, enumerate_offsets, nearest_initialized
from .emitter import SourceEmitter
from .schedule import ScheduleCompiler, ScheduleStats
from .table import compile_direction_table, emit_direction_table
from .generator import GenerationResult, PathfinderGenerator, generate

__all__ = [
    'GenerationError',
    'TopologyError',
    'EmitterError',
    'Offset',
    'Topology',
    'enumerate_offsets',
    'nearest_initialized',
    'SourceEmitter',
    'ScheduleCompiler',
    'ScheduleStats',
    'compile_direction_table',
    'emit_direction_table',
    'GenerationResult',
    'PathfinderGenerator',
    'generate',
]
