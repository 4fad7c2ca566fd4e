"""Migration registry — one transform per from-version.

A migration advances a payload exactly one version, ``v → v + 1``.  The
registry holds at most one migration per from-version; registering the
same from-version twice replaces the earlier transform.

Quick-start::

    registry = MigrationRegistry()
    registry.register(1, split_name, current_version=3)
    registry.register(2, add_email, current_version=3)

    registry.lookup(1)  # -> split_name
    registry.lookup(3)  # -> None
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Union

from ..exceptions import InvalidMigrationRangeError
from ..ports.migration import MigrationFn

logger = logging.getLogger("json_versioned.migrations")


def _is_valid_range(from_version: int, to_version: int, current_version: int) -> bool:
    return not (
        from_version < 1
        or from_version >= current_version
        or to_version < 1
        or to_version > current_version
    )


def check_version_type(name: str, value: object) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{name} must be an int, got {type(value).__name__}")


# ── Declarative step ────────────────────────────────────────────────


@dataclass(frozen=True)
class MigrationStep:
    """A declared migration *into* ``to_version``.

    This is the explicit replacement for decorator-declared migrations:
    collect steps in a list (or a :class:`~json_versioned.schema.VersionedSchema`)
    and hand them to the codec at construction.
    """

    to_version: int
    transform: MigrationFn

    @property
    def from_version(self) -> int:
        return self.to_version - 1


#: Anything the codec accepts as a seed migration.
StepLike = Union[MigrationStep, tuple[int, MigrationFn]]


def coerce_steps(steps: Iterable[StepLike]) -> list[MigrationStep]:
    """Normalise ``(to_version, transform)`` pairs into :class:`MigrationStep`."""
    result: list[MigrationStep] = []
    for step in steps:
        if isinstance(step, MigrationStep):
            result.append(step)
        else:
            to_version, transform = step
            result.append(MigrationStep(to_version, transform))
    return result


# ── Registry ────────────────────────────────────────────────────────


class MigrationRegistry:
    """Mapping from from-version to the transform that advances it by one.

    The registry does not own a current version; :meth:`register` is told
    which version is the ceiling so the owning codec can keep that state.
    """

    def __init__(self) -> None:
        self._migrations: dict[int, MigrationFn] = {}

    def register(
        self,
        from_version: int,
        transform: MigrationFn,
        *,
        current_version: int,
    ) -> None:
        """Store *transform* for ``from_version → from_version + 1``.

        Raises:
            InvalidMigrationRangeError: If the step falls outside
                ``[1, current_version]`` or does not move forward.
            TypeError: If *transform* is not callable or a version is not an int.
        """
        check_version_type("from_version", from_version)
        if not callable(transform):
            raise TypeError(
                f"Migration for v{from_version} must be callable, "
                f"got {type(transform).__name__}"
            )

        to_version = from_version + 1
        if not _is_valid_range(from_version, to_version, current_version):
            raise InvalidMigrationRangeError(from_version, to_version, current_version)

        if from_version in self._migrations:
            logger.debug(
                "Replacing migration v%d → v%d", from_version, to_version
            )
        self._migrations[from_version] = transform
        logger.debug("Registered migration v%d → v%d", from_version, to_version)

    def lookup(self, from_version: int) -> MigrationFn | None:
        """Return the transform registered at *from_version*, if any."""
        return self._migrations.get(from_version)

    def __contains__(self, from_version: object) -> bool:
        return from_version in self._migrations

    def __len__(self) -> int:
        return len(self._migrations)

    def versions(self) -> list[int]:
        """Return all registered from-versions in ascending order."""
        return sorted(self._migrations)

    def out_of_range(self, current_version: int) -> list[int]:
        """Return registered from-versions that *current_version* would invalidate."""
        return [
            v
            for v in self.versions()
            if not _is_valid_range(v, v + 1, current_version)
        ]

    def clear(self) -> None:
        """Remove all registrations."""
        self._migrations.clear()
