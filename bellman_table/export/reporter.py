"""Summary report generation for pathfinder generation and preview walks."""

from typing import Dict, Optional, TYPE_CHECKING
from pathlib import Path

if TYPE_CHECKING:
    from ..compiler.generator import GenerationResult
    from ..model.state import TickState


class Reporter:
    """Generates summary statistics and formatted text report."""

    def __init__(self, config_path: Optional[str], result: "GenerationResult"):
        self.config_path = config_path
        self.result = result
        self.ticks = 0
        self.moves = 0
        self.move_counts: Dict[str, int] = {}

    def update(self, state: "TickState") -> None:
        """Accumulate walk metrics per tick."""
        self.ticks += 1
        if state.moved:
            self.moves += 1
        name = state.move.name
        self.move_counts[name] = self.move_counts.get(name, 0) + 1

    def generation_lines(self, source_path: Optional[Path]) -> list:
        stats = self.result.stats
        topology = self.result.topology
        return [
            "",
            "=" * 80,
            "                    BELLMAN-FORD PATHFINDER GENERATION REPORT",
            "=" * 80,
            f"Configuration: {self.config_path or '(defaults)'}",
            "",
            "GENERATED MODULE",
            "-" * 40,
            f"Vision radius:         {topology.radius} r^2",
            f"Cells:                 {stats.cells} ({stats.ring_cells} next to origin)",
            f"Initial checks:        {stats.initial_checks}",
            f"Checks per round:      {stats.round_checks}",
            f"Source lines:          {self.result.line_count}",
            f"Source file:           {source_path if source_path else '(not written)'}",
        ]

    def generate_summary(self, summary: Optional[Dict],
                         output_dir: Path,
                         source_path: Optional[Path],
                         csv_enabled: bool,
                         snapshot_enabled: bool,
                         gif_enabled: bool) -> str:
        """Returns formatted text report."""
        lines = self.generation_lines(source_path)

        if summary is not None:
            optimality = summary['optimality']
            compared = optimality['compared']
            optimal = optimality['optimal']
            optimal_pct = (optimal / compared * 100) if compared > 0 else 0
            moves = ", ".join(f"{k}={v}" for k, v in sorted(self.move_counts.items()))
            lines += [
                "",
                "PREVIEW WALK",
                "-" * 40,
                f"Ticks:                 {summary['total_steps']}",
                f"Steps taken:           {summary['steps_taken']}",
                f"Target reached:        {'yes' if summary['reached'] else 'no'}",
                f"Stalled:               {'yes' if summary['stalled'] else 'no'}",
                f"Moves:                 {moves or '-'}",
                f"Optimal cells:         {optimal} / {compared} ({optimal_pct:.1f}%)",
                f"Worst excess:          {optimality['worst_excess']:.0f}",
                "",
                "OUTPUT FILES",
                "-" * 40,
            ]

            # Output file paths
            if csv_enabled:
                lines.append(f"CSV Log:    {output_dir / 'walk_log.csv'}")
            else:
                lines.append("CSV Log:    (disabled)")

            if snapshot_enabled:
                lines.append(f"Snapshot:   {output_dir / 'field.png'}")
            else:
                lines.append("Snapshot:   (disabled)")

            if gif_enabled:
                lines.append(f"Animation:  {output_dir / 'walk.gif'}")
            else:
                lines.append("Animation:  (disabled)")

        lines.append("=" * 80)

        return "\n".join(lines)
