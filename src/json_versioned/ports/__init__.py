"""Ports — protocols the codec depends on."""

from .encoding import IEnvelopeEncoder
from .migration import MigrationFn

__all__ = [
    "IEnvelopeEncoder",
    "MigrationFn",
]
