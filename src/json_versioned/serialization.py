"""EnvelopeSerializer — envelope roundtrip over a swappable encoder."""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from .envelope import VersionedEnvelope
from .exceptions import EnvelopeDecodeError, EnvelopeEncodeError

if TYPE_CHECKING:
    from .ports.encoding import IEnvelopeEncoder


def _json_serializer(obj: Any) -> Any:
    """Serialize datetime and other non-JSON types."""
    if hasattr(obj, "isoformat"):
        return obj.isoformat()
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


def _check_keys(value: Any) -> None:
    """Reject mapping keys that JSON would silently turn into strings."""
    stack = [value]
    seen: set[int] = set()
    while stack:
        item = stack.pop()
        if id(item) in seen:
            continue
        if isinstance(item, Mapping):
            seen.add(id(item))
            for key, child in item.items():
                if not isinstance(key, str):
                    raise TypeError(
                        f"Mapping keys must be str, got {type(key).__name__} {key!r}"
                    )
                stack.append(child)
        elif isinstance(item, (list, tuple)):
            seen.add(id(item))
            stack.extend(item)


class JsonEnvelopeEncoder:
    """Reference encoding: compact UTF-8 JSON, ``{"version":1,"data":{...}}``.

    Payloads must be JSON-native: mapping keys other than ``str`` are
    rejected rather than coerced, so a roundtrip returns what was written.
    """

    def __init__(self, *, sort_keys: bool = False) -> None:
        self._sort_keys = sort_keys

    def encode(self, document: dict[str, Any]) -> bytes:
        _check_keys(document)
        return json.dumps(
            document,
            default=_json_serializer,
            separators=(",", ":"),
            ensure_ascii=False,
            sort_keys=self._sort_keys,
        ).encode("utf-8")

    def decode(self, raw: bytes | str) -> Any:
        if isinstance(raw, (bytes, bytearray)):
            raw = raw.decode("utf-8")
        return json.loads(raw)


class EnvelopeSerializer:
    """Serialize/deserialize :class:`VersionedEnvelope` to/from bytes.

    The wire encoding is delegated to an :class:`IEnvelopeEncoder`
    (JSON by default); shape validation is done by the envelope model.
    """

    def __init__(self, encoder: IEnvelopeEncoder | None = None) -> None:
        self._encoder: IEnvelopeEncoder = encoder or JsonEnvelopeEncoder()

    @property
    def encoder(self) -> IEnvelopeEncoder:
        return self._encoder

    def dump(self, envelope: VersionedEnvelope) -> bytes:
        """Encode envelope to bytes."""
        try:
            return self._encoder.encode(envelope.model_dump(mode="python"))
        except (TypeError, ValueError, RecursionError) as e:
            raise EnvelopeEncodeError(str(e)) from e

    def load(self, raw: bytes | str) -> VersionedEnvelope:
        """Decode bytes to a validated envelope."""
        try:
            document = self._encoder.decode(raw)
        except (TypeError, ValueError, RecursionError) as e:
            # JSONDecodeError and UnicodeDecodeError are both ValueErrors;
            # deeply nested input exhausts the scanner's recursion limit.
            raise EnvelopeDecodeError(f"Malformed envelope: {e}") from e

        if not isinstance(document, Mapping):
            raise EnvelopeDecodeError(
                f"Malformed envelope: expected an object, got {type(document).__name__}"
            )

        try:
            return VersionedEnvelope.model_validate(dict(document))
        except (ValidationError, RecursionError) as e:
            raise EnvelopeDecodeError(f"Malformed envelope: {e}") from e
