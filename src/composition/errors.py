"""
Error kinds raised inside the composition/scoring core.

Public entry points never let these escape: they are converted to the
neutral default (score 50, empty breakdown) where the caller sees them.
"""


class CompositionError(Exception):
    """Base class for composition parsing and scoring errors."""


class NoCompositionFound(CompositionError):
    """Text contained no usable percentage/material pattern."""


class DegenerateBlendError(CompositionError):
    """Material list is empty or its percentages sum to zero."""
