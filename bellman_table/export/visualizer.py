"""Visualization of relaxed direction fields and preview walks."""

import numpy as np
import matplotlib
matplotlib.use('Agg')  # Use non-interactive backend
import matplotlib.pyplot as plt
from matplotlib.colors import to_rgb
from pathlib import Path
from typing import List, Tuple, TYPE_CHECKING
from PIL import Image
import io

from ..model.direction import COMPASS

if TYPE_CHECKING:
    from ..model.grid import GridMap
    from ..model.state import TickState


class Visualizer:
    """
    Generates visual outputs using matplotlib.

    Supports:
    - Single PNG snapshots of the direction field around the agent
    - Animated GIF compilation of a walk
    """

    # Color scheme
    COLORS = {
        'wall': '#2C3E50',      # Dark blue-gray
        'floor': '#ECF0F1',     # Light gray
        'rubble': '#A0522D',    # Brown
        'blocker': '#E74C3C',   # Red
        'agent': '#3498DB',     # Blue
        'target': '#F39C12',    # Orange
        'route': '#27AE60',     # Green
    }

    # One arrow color per best direction
    DIRECTION_COLORS = dict(zip(
        COMPASS, matplotlib.colormaps['hsv'](np.linspace(0, 1, 9))[:8]
    ))

    def __init__(self, grid: "GridMap"):
        self.grid = grid
        self.width = grid.width
        self.height = grid.height
        self.frames: List[Image.Image] = []

    def _create_figure(self, state: "TickState",
                       route: List[Tuple[int, int]]) -> plt.Figure:
        """Create matplotlib figure for one tick."""
        aspect = self.width / self.height
        fig_height = 6
        fig_width = max(8, fig_height * aspect)
        fig, ax = plt.subplots(figsize=(fig_width, fig_height))

        # Base layer: floor, rubble tint and walls
        base = np.ones((self.height, self.width, 3))
        base[:, :] = to_rgb(self.COLORS['floor'])
        if np.max(self.grid.rubble) > 0:
            normalized = self.grid.rubble / np.max(self.grid.rubble)
            rubble_rgb = to_rgb(self.COLORS['rubble'])
            for c in range(3):
                base[:, :, c] = np.clip(
                    base[:, :, c] * (1 - 0.6 * normalized) +
                    rubble_rgb[c] * 0.6 * normalized,
                    0, 1
                )
        base[self.grid.walls] = to_rgb(self.COLORS['wall'])

        ax.imshow(base, origin='lower', aspect='equal',
                  extent=[-0.5, self.width - 0.5, -0.5, self.height - 0.5])

        # Blockers (everything occupied except the walking agent)
        for bx, by in self.grid.get_occupied_positions():
            if (bx, by) == (state.x, state.y):
                continue
            ax.plot(bx, by, 's', color=self.COLORS['blocker'],
                    markersize=7, markeredgecolor='black', markeredgewidth=0.5)

        # Direction field: each valid cell's best direction
        if state.field is not None:
            ox, oy = state.field.origin
            for cell in state.field.cells:
                if not cell.valid or cell.best_dir not in self.DIRECTION_COLORS:
                    continue
                ax.arrow(ox + cell.dx, oy + cell.dy,
                         0.35 * cell.best_dir.dx, 0.35 * cell.best_dir.dy,
                         head_width=0.15, length_includes_head=True,
                         color=self.DIRECTION_COLORS[cell.best_dir], alpha=0.8)

        # Route so far
        if len(route) > 1:
            xs, ys = zip(*route)
            ax.plot(xs, ys, '-', color=self.COLORS['route'], linewidth=2)

        tx, ty = state.target
        ax.plot(tx, ty, '*', color=self.COLORS['target'],
                markersize=14, markeredgecolor='black', markeredgewidth=0.5)
        ax.plot(state.x, state.y, 'o', color=self.COLORS['agent'],
                markersize=9, markeredgecolor='white', markeredgewidth=0.5)

        # Title and labels
        ax.set_title(f'Tick {state.step} | Move: {state.move.name} | '
                     f'Path length: {state.path_length}')
        ax.set_xlabel('X')
        ax.set_ylabel('Y')

        # Set axis limits
        ax.set_xlim(-0.5, self.width - 0.5)
        ax.set_ylim(-0.5, self.height - 0.5)

        # Legend
        legend_elements = [
            plt.Line2D([0], [0], marker='o', color='w', label='Agent',
                       markerfacecolor=self.COLORS['agent'], markersize=8),
            plt.Line2D([0], [0], marker='*', color='w', label='Target',
                       markerfacecolor=self.COLORS['target'], markersize=10),
            plt.Line2D([0], [0], marker='s', color='w', label='Occupied',
                       markerfacecolor=self.COLORS['blocker'], markersize=8),
        ]
        ax.legend(handles=legend_elements, loc='upper right', fontsize=8)

        plt.tight_layout()
        return fig

    def buffer_frame(self, state: "TickState",
                     route: List[Tuple[int, int]]) -> None:
        """Store frame for GIF generation."""
        fig = self._create_figure(state, route)

        # Convert to PIL Image
        buf = io.BytesIO()
        fig.savefig(buf, format='png', dpi=80)
        buf.seek(0)
        img = Image.open(buf).copy()
        self.frames.append(img)
        buf.close()
        plt.close(fig)

    def save_snapshot(self, state: "TickState", route: List[Tuple[int, int]],
                      output_path: Path) -> None:
        """Save single PNG image of one tick."""
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        fig = self._create_figure(state, route)
        fig.savefig(output_path, dpi=150, bbox_inches='tight')
        plt.close(fig)

    def generate_gif(self, output_path: Path, fps: int = 4) -> None:
        """Compile buffered frames into animated GIF."""
        if not self.frames:
            return

        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        duration = int(1000 / fps)  # milliseconds per frame

        self.frames[0].save(
            output_path,
            save_all=True,
            append_images=self.frames[1:],
            duration=duration,
            loop=0
        )

    def clear_frames(self) -> None:
        """Clear buffered frames."""
        self.frames.clear()
