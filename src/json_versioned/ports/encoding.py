"""IEnvelopeEncoder — protocol for the swappable envelope wire encoding."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class IEnvelopeEncoder(Protocol):
    """
    Turns an envelope document into bytes and back.

    The document handed to :meth:`encode` is always a plain mapping with
    exactly two keys, ``version`` and ``data``.  Implementations should let
    their native errors propagate; the serializer wraps them.
    """

    def encode(self, document: dict[str, Any]) -> bytes:
        """Encode an envelope document to bytes."""
        ...

    def decode(self, raw: bytes | str) -> Any:
        """Decode bytes into a document (expected to be a mapping)."""
        ...
