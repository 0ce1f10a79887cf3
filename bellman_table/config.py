"""Configuration dataclasses and YAML loader for the pathfinding generator."""

from dataclasses import dataclass, field
from typing import List, Tuple, Dict, Any, Optional
from pathlib import Path
import yaml


@dataclass
class CostConfig:
    origin_cost: int = 10               # base cost added for the agent's own cell
    initial_cost: int = 110             # upper bound on any host movement cost
    initial_path_length: int = 1147483647


@dataclass
class RuntimeConfig:
    direction_import: str = "bellman_table.model.direction"
    direction_class: str = "Direction"
    function_name: str = "pathfind_towards"


@dataclass
class GeneratorConfig:
    radius: int                         # vision radius in r^2
    comments: bool = True
    indicators: bool = False
    costs: CostConfig = field(default_factory=CostConfig)
    runtime: RuntimeConfig = field(default_factory=RuntimeConfig)


@dataclass
class GridConfig:
    width: int
    height: int


@dataclass
class WallSpec:
    wall_type: str  # "rectangle" or "points"
    data: Dict[str, Any]


@dataclass
class RubbleSpec:
    x: int
    y: int
    width: int
    height: int
    amount: int


@dataclass
class LayoutConfig:
    walls: List[WallSpec] = field(default_factory=list)
    rubble: List[RubbleSpec] = field(default_factory=list)
    occupied: List[Tuple[int, int]] = field(default_factory=list)


@dataclass
class PreviewConfig:
    grid: GridConfig
    start: Tuple[int, int]
    target: Tuple[int, int]
    extra_rounds: int = 0
    max_steps: int = 200
    step_cost: int = 10
    layout: LayoutConfig = field(default_factory=LayoutConfig)


@dataclass
class AppConfig:
    generator: GeneratorConfig
    preview: Optional[PreviewConfig] = None

    # Export flags (can be overridden by CLI)
    source_path: Optional[Path] = None
    csv_enabled: bool = True
    snapshot_enabled: bool = True
    gif_enabled: bool = False
    quiet: bool = False
    out_dir: Path = field(default_factory=lambda: Path("./output"))

    @property
    def source_file(self) -> Path:
        """Where the generated module goes, ``BMF<radius>.py`` by default."""
        if self.source_path is not None:
            return self.source_path
        return self.out_dir / f"BMF{self.generator.radius}.py"


def _parse_walls(walls_raw: List[Dict]) -> List[WallSpec]:
    """Parse wall specifications from raw YAML data."""
    walls = []
    for w in walls_raw:
        wall_type = w.get('type', 'rectangle')
        if wall_type == 'rectangle':
            data = {
                'x': w['x'],
                'y': w['y'],
                'width': w['width'],
                'height': w['height']
            }
        elif wall_type == 'points':
            data = {'coords': [tuple(c) for c in w['coords']]}
        else:
            raise ValueError(f"Unknown wall type: {wall_type}")
        walls.append(WallSpec(wall_type=wall_type, data=data))
    return walls


def _parse_rubble(rubble_raw: List[Dict]) -> List[RubbleSpec]:
    """Parse rubble rectangles from raw YAML data."""
    return [
        RubbleSpec(
            x=r['x'],
            y=r['y'],
            width=r.get('width', 1),
            height=r.get('height', 1),
            amount=r['amount']
        )
        for r in rubble_raw
    ]


def _parse_generator(gen_raw: Dict) -> GeneratorConfig:
    costs_raw = gen_raw.get('costs', {})
    runtime_raw = gen_raw.get('runtime', {})
    defaults = CostConfig()
    runtime_defaults = RuntimeConfig()
    return GeneratorConfig(
        radius=gen_raw['radius'],
        comments=gen_raw.get('comments', True),
        indicators=gen_raw.get('indicators', False),
        costs=CostConfig(
            origin_cost=costs_raw.get('origin_cost', defaults.origin_cost),
            initial_cost=costs_raw.get('initial_cost', defaults.initial_cost),
            initial_path_length=costs_raw.get(
                'initial_path_length', defaults.initial_path_length)
        ),
        runtime=RuntimeConfig(
            direction_import=runtime_raw.get(
                'direction_import', runtime_defaults.direction_import),
            direction_class=runtime_raw.get(
                'direction_class', runtime_defaults.direction_class),
            function_name=runtime_raw.get(
                'function_name', runtime_defaults.function_name)
        )
    )


def _parse_preview(preview_raw: Dict) -> PreviewConfig:
    layout_raw = preview_raw.get('layout', {})
    layout = LayoutConfig(
        walls=_parse_walls(layout_raw.get('walls', [])),
        rubble=_parse_rubble(layout_raw.get('rubble', [])),
        occupied=[tuple(c) for c in layout_raw.get('occupied', [])]
    )
    step_cost = preview_raw.get('step_cost', 10)
    if step_cost < 1:
        raise ValueError(f"step_cost must be at least 1, got {step_cost}")
    return PreviewConfig(
        grid=GridConfig(
            width=preview_raw['grid']['width'],
            height=preview_raw['grid']['height']
        ),
        start=tuple(preview_raw['start']),
        target=tuple(preview_raw['target']),
        extra_rounds=preview_raw.get('extra_rounds', 0),
        max_steps=preview_raw.get('max_steps', 200),
        step_cost=step_cost,
        layout=layout
    )


def _check_movement_costs(preview: PreviewConfig, costs: CostConfig) -> None:
    """The dearest preview step must stay within the generator's initial_cost."""
    worst_rubble = max((r.amount for r in preview.layout.rubble), default=0)
    worst = preview.step_cost + worst_rubble
    if worst > costs.initial_cost:
        raise ValueError(
            f"Preview movement cost {worst} (step_cost + rubble) exceeds "
            f"initial_cost {costs.initial_cost}"
        )


def default_config(radius: int) -> AppConfig:
    """Configuration for generating a module without a config file."""
    return AppConfig(generator=GeneratorConfig(radius=radius))


def load_config(config_path: Path) -> AppConfig:
    """Load and validate YAML configuration file."""
    with open(config_path) as f:
        raw = yaml.safe_load(f)

    generator = _parse_generator(raw['generator'])

    # Preview walk is optional
    preview = None
    if raw.get('preview'):
        preview = _parse_preview(raw['preview'])
        _check_movement_costs(preview, generator.costs)

    # Parse export config (optional)
    export_raw = raw.get('export', {})
    source = export_raw.get('source')

    return AppConfig(
        generator=generator,
        preview=preview,
        source_path=Path(source) if source else None,
        csv_enabled=export_raw.get('csv', True),
        snapshot_enabled=export_raw.get('snapshot', True),
        gif_enabled=export_raw.get('gif', False)
    )
