"""Atomic writer for generated source files."""

import os
import tempfile
from pathlib import Path


class SourceWriter:
    """
    Writes a rendered module in one step.

    The text goes to a temporary file next to the destination which then
    replaces it, so a failed run never leaves a half-written module behind.
    """

    def __init__(self, output_path: Path):
        self.output_path = Path(output_path)

    def write(self, source: str) -> Path:
        self.output_path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=self.output_path.parent, prefix=f".{self.output_path.name}.",
            suffix=".tmp"
        )
        try:
            with os.fdopen(fd, 'w', encoding='utf-8', newline='\n') as f:
                f.write(source)
            os.replace(tmp_name, self.output_path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise
        return self.output_path
