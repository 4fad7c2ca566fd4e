"""Exceptions for json-versioned."""

from __future__ import annotations


class VersioningError(Exception):
    """Root exception for the entire json-versioned package."""


# ── Configuration ────────────────────────────────────────────────────


class ConfigurationError(VersioningError):
    """Base class for registration and codec configuration errors."""


class InvalidMigrationRangeError(ConfigurationError, ValueError):
    """Raised when a migration's version bounds are not usable.

    A migration must move data strictly forward, starting at version 1 or
    later, and never past the version the codec currently declares as
    latest.
    """

    def __init__(
        self,
        from_version: int,
        to_version: int,
        current_version: int,
    ) -> None:
        self.from_version = from_version
        self.to_version = to_version
        self.current_version = current_version
        super().__init__(
            f"Invalid migration v{from_version} → v{to_version}: versions must "
            f"lie within [1, {current_version}] and move forward "
            f"(current version is {current_version})"
        )


class InvalidVersionError(ConfigurationError, ValueError):
    """Raised when a codec is given a current version below 1."""

    def __init__(self, version: int) -> None:
        self.version = version
        super().__init__(f"Current version must be >= 1, got {version!r}")


# ── Envelope ─────────────────────────────────────────────────────────


class EnvelopeError(VersioningError):
    """Base class for wire-level envelope errors."""


class EnvelopeDecodeError(EnvelopeError):
    """Raised when bytes cannot be parsed into a ``{version, data}`` envelope."""


class EnvelopeEncodeError(EnvelopeError):
    """Raised when a payload cannot be encoded into an envelope."""


# ── Migration ────────────────────────────────────────────────────────


class MigrationError(VersioningError):
    """Base class for read-time migration failures."""


class FutureVersionError(MigrationError):
    """Raised when stored data is newer than the codec understands."""

    def __init__(self, stored_version: int, current_version: int) -> None:
        self.stored_version = stored_version
        self.current_version = current_version
        super().__init__(
            f"Cannot deserialize data from version {stored_version} "
            f"with current version {current_version}"
        )


class MissingMigrationError(MigrationError, LookupError):
    """Raised when the forward walk needs a migration that was never registered.

    ``version`` is the first from-version found without a migration.
    """

    def __init__(self, version: int, current_version: int) -> None:
        self.version = version
        self.current_version = current_version
        super().__init__(
            f"Missing migration for version {version} "
            f"(v{version} → v{version + 1}, current version {current_version})"
        )


__all__ = [
    "ConfigurationError",
    "EnvelopeDecodeError",
    "EnvelopeEncodeError",
    "EnvelopeError",
    "FutureVersionError",
    "InvalidMigrationRangeError",
    "InvalidVersionError",
    "MigrationError",
    "MissingMigrationError",
    "VersioningError",
]
