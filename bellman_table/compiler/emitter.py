"""Line-oriented Python source emitter used by the compilers."""

from contextlib import contextmanager
from typing import Callable, Iterator, List, Optional

from .errors import EmitterError


class SourceEmitter:
    """
    Accumulates generated source one line at a time.

    Indentation is a push/pop counter: ``enter_block``/``exit_block`` or the
    ``block`` context manager, which restores the depth on every exit path.
    Comments and docstrings can be switched off to shrink the output;
    statements are never affected.
    """

    def __init__(self, indent: str = "    "):
        self.indent = indent
        self.lines: List[str] = []
        self.depth = 0
        self.comments_enabled = True
        # Statements (not comments or blank lines) emitted so far
        self.statements = 0

    def set_comments_enabled(self, enabled: bool) -> None:
        self.comments_enabled = enabled

    def emit_line(self, *lines: str) -> None:
        """Emit each line at the current depth; an empty string is a blank line."""
        for line in lines:
            if not line:
                self.lines.append("")
                continue
            self.lines.append(self.indent * self.depth + line)
            if not line.lstrip().startswith("#"):
                self.statements += 1

    def blank_line(self) -> None:
        self.lines.append("")

    def enter_block(self) -> None:
        self.depth += 1

    def exit_block(self) -> None:
        if self.depth == 0:
            raise EmitterError("exit_block() without a matching enter_block()")
        self.depth -= 1

    @contextmanager
    def block(self, header: Optional[str] = None) -> Iterator[None]:
        """
        Emit ``header`` and indent everything written inside the ``with``.

        A block that ends up without a statement gets ``pass`` so the output
        always parses.
        """
        if header is not None:
            if not header.split("#")[0].rstrip().endswith(":"):
                raise EmitterError(f"Block header must end with ':': {header!r}")
            self.emit_line(header)
        depth = self.depth
        before = self.statements
        self.enter_block()
        try:
            yield
            if self.depth != depth + 1:
                raise EmitterError(
                    f"Unbalanced nesting inside block {header!r}: "
                    f"depth {self.depth}, expected {depth + 1}"
                )
            if self.statements == before:
                self.emit_line("pass")
        finally:
            self.depth = depth

    def emit_loop(self, bound: str, body: Callable[[], None],
                  variable: str = "_") -> None:
        """Emit a bounded ``for`` loop over ``range(bound)`` around ``body``."""
        with self.block(f"for {variable} in range({bound}):"):
            body()

    def emit_comment(self, text: str) -> None:
        if self.comments_enabled:
            self.emit_line(f"# {text}" if text else "#")

    def emit_block_comment(self, *lines: str) -> None:
        """Emit a run of ``#`` lines followed by nothing else."""
        for line in lines:
            self.emit_comment(line)

    def emit_docstring(self, *lines: str) -> None:
        """Emit a triple-quoted docstring; skipped when comments are off."""
        if not self.comments_enabled or not lines:
            return
        if len(lines) == 1:
            self.emit_line(f'"""{lines[0]}"""')
            return
        self.emit_line(f'"""{lines[0]}')
        for line in lines[1:]:
            self.emit_line(line)
        self.emit_line('"""')

    def render(self) -> str:
        """Return the finished source text."""
        if self.depth != 0:
            raise EmitterError(f"{self.depth} block(s) left open at render time")
        return "\n".join(self.lines).rstrip("\n") + "\n"
