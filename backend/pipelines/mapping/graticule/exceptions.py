"""
Graticule Exceptions
"""


class GraticuleError(Exception):
    """Base class for graticule engine failures."""


class GraticuleConfigurationError(GraticuleError, ValueError):
    """The engine was constructed with options it cannot run with."""


class GraticuleInvariantError(GraticuleError, AssertionError):
    """A collaborator or caller broke a geometric invariant (e.g. empty curve fit)."""
