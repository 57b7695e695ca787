"""Exceptions raised by editalign."""


class AlignmentError(ValueError):
    """Base class for all editalign errors."""


class InvalidArgumentError(AlignmentError):
    """A required argument was missing or malformed."""


class InvalidMergeError(AlignmentError):
    """Two edits were merged that are not siblings."""


class InvalidCostError(AlignmentError):
    """A cost function returned a negative or NaN value."""
