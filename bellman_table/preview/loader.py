"""Import a generated pathfinding module from its source file."""

import importlib.util
import types
from pathlib import Path
from typing import Optional


def load_pathfinder(path: Path, name: Optional[str] = None) -> types.ModuleType:
    """
    Import the module written at ``path`` and return it.

    The module is not registered in ``sys.modules``; every call yields an
    independent copy. Raises ImportError if ``path`` cannot be loaded as a
    Python source file.
    """
    path = Path(path)
    spec = importlib.util.spec_from_file_location(name or path.stem, path)
    if spec is None or spec.loader is None:
        raise ImportError(f"Cannot load pathfinder from {path}")
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module
