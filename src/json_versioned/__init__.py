"""json-versioned — versioned envelopes with read-time schema migration.

Zero infrastructure dependencies. pydantic validates the envelope shape.
"""

from __future__ import annotations

from .codec import VersionedCodec, create_codec
from .envelope import VersionedEnvelope
from .exceptions import (
    ConfigurationError,
    EnvelopeDecodeError,
    EnvelopeEncodeError,
    EnvelopeError,
    FutureVersionError,
    InvalidMigrationRangeError,
    InvalidVersionError,
    MigrationError,
    MissingMigrationError,
    VersioningError,
)
from .instrumentation import (
    HookRegistration,
    HookRegistry,
    InstrumentationHook,
    get_hook_registry,
    set_hook_registry,
)
from .migrations import (
    MigrationBuilder,
    MigrationRegistry,
    MigrationStep,
)
from .ports import IEnvelopeEncoder, MigrationFn
from .schema import VersionedSchema
from .serialization import EnvelopeSerializer, JsonEnvelopeEncoder

__all__ = [
    # Codec
    "VersionedCodec",
    "create_codec",
    "VersionedSchema",
    # Envelope
    "VersionedEnvelope",
    "EnvelopeSerializer",
    "JsonEnvelopeEncoder",
    "IEnvelopeEncoder",
    # Migrations
    "MigrationBuilder",
    "MigrationFn",
    "MigrationRegistry",
    "MigrationStep",
    # Instrumentation
    "HookRegistration",
    "HookRegistry",
    "InstrumentationHook",
    "get_hook_registry",
    "set_hook_registry",
    # Exceptions
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
