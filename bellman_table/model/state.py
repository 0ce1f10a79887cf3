"""State snapshot dataclasses for preview walks."""

from dataclasses import dataclass
from typing import List, Dict, Optional, Tuple

from .direction import Direction


@dataclass(frozen=True)
class CellSnapshot:
    """One cell of the relaxed window, relative to the agent."""
    dx: int
    dy: int
    valid: bool
    path_length: int
    best_dir: Direction

    @property
    def move(self) -> Direction:
        """First move from the origin towards this cell."""
        return self.best_dir.opposite()


@dataclass
class FieldSnapshot:
    """The relaxed window around the agent at one tick."""
    origin: Tuple[int, int]
    cells: List[CellSnapshot]

    def by_offset(self) -> Dict[Tuple[int, int], CellSnapshot]:
        return {(c.dx, c.dy): c for c in self.cells}


@dataclass
class TickState:
    """Complete snapshot of a preview walk at a given tick."""
    step: int
    x: int
    y: int
    move: Direction
    moved: bool
    target: Tuple[int, int]
    path_length: Optional[int]   # recorded length to the (clamped) target
    reached: bool
    field: Optional[FieldSnapshot] = None

    def to_csv_row(self) -> Dict:
        """Convert to CSV-compatible format."""
        return {
            "step": self.step,
            "x": self.x,
            "y": self.y,
            "move": self.move.name,
            "moved": int(self.moved),
            "target_x": self.target[0],
            "target_y": self.target[1],
            "path_length": "" if self.path_length is None else self.path_length,
            "reached": int(self.reached)
        }
