"""VersionedEnvelope — the persisted unit pairing a schema version with data."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class VersionedEnvelope(BaseModel):
    """Immutable ``{version, data}`` wrapper written to storage or the wire.

    ``data`` is opaque here; its shape is whatever ``version`` says it is.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    version: int = Field(..., ge=0, strict=True, description="Schema version tag")
    data: Any = Field(..., description="Payload shaped for ``version``")
