"""Exceptions raised by the thickness sweep."""


class SlabMCError(Exception):
    """Base class for all slab_mc errors."""


class InvalidConfiguration(SlabMCError, ValueError):
    """Non-positive worker count, step, population or cross-section."""


class EmptySweep(InvalidConfiguration):
    """The sweep contains no thickness values (start >= end)."""


class ResourceExhaustion(SlabMCError, RuntimeError):
    """The result buffer could not be allocated or a worker could not be started."""
