"""I/O package for generated pathfinders and preview walks."""

from .source_writer import SourceWriter
from .csv_writer import CSVWriter
from .visualizer import Visualizer
from .reporter import Reporter

__all__ = ['SourceWriter', 'CSVWriter', 'Visualizer', 'Reporter']
