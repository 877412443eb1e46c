"""
Setup-time errors for topology construction.

Eligibility checks never raise: running out of energy is a normal ``False``.
"""


class ConfigurationError(ValueError):
    """Fatal configuration problem detected before the simulation starts."""


class NoCandidatesError(ConfigurationError):
    """A nearest-neighbor search was asked to choose from an empty set."""
