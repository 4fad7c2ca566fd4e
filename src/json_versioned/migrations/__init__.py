"""Migrations — registry, declarative steps and the fluent builder."""

from .builder import MigrationBuilder, MigrationTransformStep
from .registry import MigrationRegistry, MigrationStep, StepLike, coerce_steps

__all__ = [
    "MigrationBuilder",
    "MigrationRegistry",
    "MigrationStep",
    "MigrationTransformStep",
    "StepLike",
    "coerce_steps",
]
