"""Fluent migration declaration: ``codec.migrations.to_version(2).with_transform(fn)``."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..ports.migration import MigrationFn


class MigrationTransformStep:
    """Second half of the fluent form; registers on :meth:`with_transform`."""

    def __init__(
        self,
        to_version: int,
        register: Callable[[int, MigrationFn], None],
    ) -> None:
        self._to_version = to_version
        self._register = register

    def with_transform(self, fn: MigrationFn) -> None:
        self._register(self._to_version - 1, fn)


class MigrationBuilder:
    """Entry point of the fluent form, bound to a codec's ``register``."""

    def __init__(self, register: Callable[[int, MigrationFn], None]) -> None:
        self._register = register

    def to_version(self, version: int) -> MigrationTransformStep:
        return MigrationTransformStep(version, self._register)
