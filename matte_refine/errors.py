"""
Exceptions raised by the matte filters.

Both derive from ValueError so callers that validate images the usual way
(``except ValueError``) keep working.
"""


class MatteError(ValueError):
    """Base class for all matte-refine errors."""


class InvalidBufferError(MatteError):
    """The pixel buffer does not describe a width x height RGBA image."""


class InvalidParameterError(MatteError):
    """A filter parameter is out of range (e.g. a negative radius)."""
