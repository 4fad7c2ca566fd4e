"""VersionedSchema — explicit, immutable configuration for a versioned type.

Build the schema once, next to the type it describes, and create a codec
from it wherever one is needed::

    USER_SCHEMA = (
        VersionedSchema(3)
        .with_migration(2, split_name)
        .with_migration(3, add_email)
    )

    class UserStore:
        def __init__(self) -> None:
            self._codec = USER_SCHEMA.create_codec()

        def dump(self, user: dict[str, Any]) -> bytes:
            return self._codec.serialize(user)

        def load(self, raw: bytes) -> dict[str, Any]:
            return self._codec.deserialize(raw)

Every codec created from a schema is independent: it gets its own
registry, seeded with the schema's steps.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from .codec import VersionedCodec
from .migrations.registry import MigrationStep

if TYPE_CHECKING:
    from .instrumentation import HookRegistry
    from .ports.encoding import IEnvelopeEncoder
    from .ports.migration import MigrationFn


@dataclass(frozen=True)
class VersionedSchema:
    """Current version plus the ordered migration steps that reach it."""

    current_version: int
    steps: tuple[MigrationStep, ...] = field(default_factory=tuple)

    def with_migration(self, to_version: int, transform: MigrationFn) -> VersionedSchema:
        """Return a copy of this schema with one more step."""
        return VersionedSchema(
            self.current_version,
            (*self.steps, MigrationStep(to_version, transform)),
        )

    def create_codec(
        self,
        *,
        encoder: IEnvelopeEncoder | None = None,
        hooks: HookRegistry | None = None,
    ) -> VersionedCodec[Any]:
        """Build a fresh codec; step ranges are validated here."""
        return VersionedCodec(
            self.current_version,
            self.steps,
            encoder=encoder,
            hooks=hooks,
        )
