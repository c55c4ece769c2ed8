"""
Error types raised by the FlapEvo engine.

All of them signal a contract violation by the caller (bad shapes, bad
topology, wrong population size …). The engine never catches them itself.
"""


class EvolutionError(ValueError):
    """Base class for every FlapEvo contract violation."""


class InvalidDimensions(EvolutionError):
    """A matrix was requested with fewer than one row or column."""


class DimensionMismatch(EvolutionError):
    """Two matrices have shapes that cannot be combined."""


class InvalidTopology(EvolutionError):
    """A network layer was given fewer than one node."""


class InputSizeMismatch(EvolutionError):
    """An input vector does not match the network's input layer."""


class InvalidRate(EvolutionError):
    """A probability outside [0, 1] was supplied."""


class EmptyPopulation(EvolutionError):
    """A generation was bred from an empty population."""


class PopulationSizeMismatch(EvolutionError):
    """A population does not have the configured size."""
