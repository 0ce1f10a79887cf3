"""Exceptions raised while generating pathfinding code."""


class GenerationError(Exception):
    """Code generation failed; nothing may be written."""


class TopologyError(GenerationError):
    """The offset topology cannot support the requested schedule."""


class EmitterError(GenerationError):
    """Indentation nesting of the emitted source is broken."""
