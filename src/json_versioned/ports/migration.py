"""MigrationFn — the shape of a single-step schema transform."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

#: A pure function taking a payload shaped for version ``v`` and returning
#: the same payload reshaped for ``v + 1``.
MigrationFn = Callable[[Any], Any]
