"""Exception types raised by the SHA-3 sponge and its public API."""
from __future__ import annotations


class Sha3Error(Exception):
    """Base class for every error raised by this library."""


class ConfigurationError(Sha3Error, ValueError):
    """A rate, suffix or algorithm name outside the FIPS 202 parameter sets."""


class InvalidSequenceError(Sha3Error, RuntimeError):
    """A sponge operation was called in a phase that does not allow it."""
