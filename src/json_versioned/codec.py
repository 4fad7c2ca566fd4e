"""VersionedCodec — envelope serialization with read-time migration.

A codec owns the current schema version of one logical type and the
migrations that lead up to it.  Writing always tags data with the current
version; reading walks the registered migrations forward from whatever
version the data was stored under.

Quick-start::

    codec = VersionedCodec(
        3,
        [
            MigrationStep(2, split_name),  # v1 → v2
            MigrationStep(3, add_email),   # v2 → v3
        ],
    )

    raw = codec.serialize({"firstName": "Ada", ...})
    user = codec.deserialize(b'{"version":1,"data":{"name":"Ada Lovelace"}}')
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING, Any, Generic, TypeVar, cast

from .envelope import VersionedEnvelope
from .exceptions import (
    FutureVersionError,
    InvalidMigrationRangeError,
    InvalidVersionError,
    MissingMigrationError,
)
from .instrumentation import get_hook_registry
from .migrations.builder import MigrationBuilder
from .migrations.registry import (
    MigrationRegistry,
    StepLike,
    check_version_type,
    coerce_steps,
)
from .serialization import EnvelopeSerializer

if TYPE_CHECKING:
    from .instrumentation import HookRegistry
    from .ports.encoding import IEnvelopeEncoder
    from .ports.migration import MigrationFn

logger = logging.getLogger("json_versioned.codec")

T = TypeVar("T")


class VersionedCodec(Generic[T]):
    """Serialize current-shape payloads; deserialize and migrate older ones.

    Instances are not thread-safe.  Register migrations during start-up,
    before the codec is shared with readers.
    """

    def __init__(
        self,
        current_version: int = 1,
        migrations: Iterable[StepLike] = (),
        *,
        encoder: IEnvelopeEncoder | None = None,
        hooks: HookRegistry | None = None,
    ) -> None:
        check_version_type("current_version", current_version)
        if current_version < 1:
            raise InvalidVersionError(current_version)

        self._current_version = current_version
        self._registry = MigrationRegistry()
        self._serializer = EnvelopeSerializer(encoder)
        self._hooks = hooks

        for step in coerce_steps(migrations):
            self.add_migration(step.to_version, step.transform)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(current_version={self._current_version}, "
            f"migrations={self._registry.versions()})"
        )

    # ── State ────────────────────────────────────────────────────────

    @property
    def current_version(self) -> int:
        return self._current_version

    @property
    def registry(self) -> MigrationRegistry:
        return self._registry

    @property
    def migrations(self) -> MigrationBuilder:
        """Fluent registration: ``codec.migrations.to_version(2).with_transform(fn)``."""
        return MigrationBuilder(self.register)

    def set_current_version(self, version: int) -> None:
        """Change the current version.

        Existing registrations are re-validated against *version*; if any
        would fall outside ``[1, version]`` nothing is changed and the
        lowest offending step is reported.

        Raises:
            InvalidVersionError: If *version* is below 1.
            InvalidMigrationRangeError: If a registered migration is invalid
                under *version*.
        """
        check_version_type("version", version)
        if version < 1:
            raise InvalidVersionError(version)

        offending = self._registry.out_of_range(version)
        if offending:
            raise InvalidMigrationRangeError(offending[0], offending[0] + 1, version)

        logger.debug(
            "Current version changed v%d → v%d", self._current_version, version
        )
        self._current_version = version

    # ── Registration ─────────────────────────────────────────────────

    def register(self, from_version: int, transform: MigrationFn) -> None:
        """Register the migration ``from_version → from_version + 1``."""
        self._registry.register(
            from_version, transform, current_version=self._current_version
        )

    def add_migration(self, to_version: int, transform: MigrationFn) -> None:
        """Register the migration that produces *to_version* data."""
        check_version_type("to_version", to_version)
        self.register(to_version - 1, transform)

    # ── Serialization ────────────────────────────────────────────────

    def serialize(self, payload: T) -> bytes:
        """Wrap *payload* in an envelope tagged with the current version.

        The payload's shape is not checked, but it must be JSON-native for
        the default encoder: mappings keyed by ``str`` only.

        Raises:
            EnvelopeEncodeError: If the payload cannot be encoded, including
                non-``str`` mapping keys and nesting too deep to encode.
        """
        envelope = VersionedEnvelope(version=self._current_version, data=payload)
        return cast(
            "bytes",
            self._run(
                "versioning.serialize",
                {"schema.version": self._current_version},
                lambda: self._serializer.dump(envelope),
            ),
        )

    def deserialize(self, raw: bytes | str) -> T:
        """Decode an envelope and migrate its data up to the current version.

        Raises:
            EnvelopeDecodeError: If *raw* is not a well-formed envelope.
            FutureVersionError: If the data is newer than the current version.
            MissingMigrationError: If a step between the stored and current
                version has no registered migration.
        """
        return cast(
            "T",
            self._run(
                "versioning.deserialize",
                {"schema.current": self._current_version},
                lambda: self._deserialize_internal(raw),
            ),
        )

    def _deserialize_internal(self, raw: bytes | str) -> Any:
        envelope = self._serializer.load(raw)
        return self._migrate(envelope.data, envelope.version)

    def upgrade(self, data: Any, stored_version: int) -> T:
        """Migrate an already-decoded payload from *stored_version*.

        *data* is copied before the first migration runs, so the caller's
        object is left untouched.
        """
        check_version_type("stored_version", stored_version)
        if stored_version < self._current_version:
            data = copy.deepcopy(data)
        return cast("T", self._migrate(data, stored_version))

    # ── Forward walk ─────────────────────────────────────────────────

    def _migrate(self, data: Any, stored_version: int) -> Any:
        current = self._current_version
        if stored_version > current:
            raise FutureVersionError(stored_version, current)
        if stored_version == current:
            return data

        # Resolve every step before running any, so a gap leaves no
        # partially migrated payload behind.
        chain: list[tuple[int, MigrationFn]] = []
        for version in range(stored_version, current):
            transform = self._registry.lookup(version)
            if transform is None:
                raise MissingMigrationError(version, current)
            chain.append((version, transform))

        for version, transform in chain:
            data = self._apply(version, transform, data)
            logger.debug("Migrated v%d → v%d", version, version + 1)

        return data

    def _apply(self, version: int, transform: MigrationFn, data: Any) -> Any:
        return self._run(
            f"versioning.migrate.{version}",
            {
                "schema.from": version,
                "schema.to": version + 1,
                "schema.current": self._current_version,
            },
            lambda: transform(data),
        )

    def _run(
        self,
        operation: str,
        attributes: dict[str, Any],
        next_handler: Callable[[], Any],
    ) -> Any:
        hooks = self._hooks if self._hooks is not None else get_hook_registry()
        if not hooks:
            return next_handler()
        return hooks.execute_all(operation, attributes, next_handler)


def create_codec(
    current_version: int,
    migrations: Iterable[StepLike] = (),
    *,
    encoder: IEnvelopeEncoder | None = None,
    hooks: HookRegistry | None = None,
) -> VersionedCodec[Any]:
    """Build a :class:`VersionedCodec`, optionally seeded with migration steps."""
    return VersionedCodec(current_version, migrations, encoder=encoder, hooks=hooks)
