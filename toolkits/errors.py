"""Exceptions raised by toolkits.

Only precondition violations are raised here. Missing keys and paths are
answered with the caller's default, and oversized pops and shifts are
clamped, so those never surface as errors.
"""


class ToolkitsError(Exception):
    """Base class for every error raised by the toolkits package."""


class InvalidArgumentError(ToolkitsError, ValueError):
    """An argument is outside the range an operation can honor.

    Raised for example when sampling more items than a collection holds,
    splitting into fewer than one group or combining keys and values of
    different lengths.
    """
