"""Instrumentation hooks — synchronous, multiple hooks with filtering.

Hooks wrap codec operations the same way middleware wraps a handler::

    def timing_hook(operation, attributes, next_handler):
        started = time.perf_counter()
        try:
            return next_handler()
        finally:
            metrics.observe(operation, time.perf_counter() - started)

    registry = HookRegistry()
    registry.register(timing_hook, operations=["versioning.migrate.*"])
    codec = VersionedCodec(3, hooks=registry)

Operations emitted by the codec:

- ``versioning.serialize``
- ``versioning.deserialize``
- ``versioning.migrate.<from_version>`` (one per applied step)
"""

from __future__ import annotations

import fnmatch
import logging
from contextvars import ContextVar
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Callable

logger = logging.getLogger("json_versioned.instrumentation")

_MATCH_CACHE_MAX_SIZE = 2048


@runtime_checkable
class InstrumentationHook(Protocol):
    """Protocol for instrumentation hooks (tracing, metrics, etc.)."""

    def __call__(
        self,
        operation: str,
        attributes: dict[str, Any],
        next_handler: Callable[[], Any],
    ) -> Any:
        """Wrap an operation with instrumentation."""
        ...


class HookRegistration:
    """A registered hook with filtering and priority."""

    def __init__(
        self,
        hook: InstrumentationHook,
        *,
        priority: int = 0,
        predicate: Callable[[str, dict[str, Any]], bool] | None = None,
        operations: list[str] | None = None,
        enabled: bool = True,
    ) -> None:
        self.hook = hook
        self.priority = priority
        self.predicate = predicate
        self.operations = operations or []
        self.enabled = enabled
        self._match_cache: dict[str, bool] = {}

    def matches(self, operation: str, attributes: dict[str, Any]) -> bool:
        """Check if this registration applies to the operation."""
        if not self.enabled:
            return False

        if self.predicate is not None and not self.predicate(operation, attributes):
            return False

        return self._matches_operation(operation)

    def _matches_operation(self, operation: str) -> bool:
        if not self.operations:
            return True
        if operation in self._match_cache:
            return self._match_cache[operation]
        matched = any(
            fnmatch.fnmatch(operation, pattern) for pattern in self.operations
        )
        if len(self._match_cache) >= _MATCH_CACHE_MAX_SIZE:
            self._match_cache.clear()
        self._match_cache[operation] = matched
        return matched

    def clear_cache(self) -> None:
        """Clear the match cache."""
        self._match_cache.clear()


class HookRegistry:
    """Registry for multiple instrumentation hooks with filtering."""

    def __init__(self) -> None:
        self._registrations: list[HookRegistration] = []

    def __bool__(self) -> bool:
        return any(r.enabled for r in self._registrations)

    def register(
        self,
        hook: InstrumentationHook,
        *,
        priority: int = 0,
        predicate: Callable[[str, dict[str, Any]], bool] | None = None,
        operations: list[str] | None = None,
        enabled: bool = True,
    ) -> HookRegistration:
        """Register a hook with optional filtering.

        Lower ``priority`` values wrap outermost.
        """
        registration = HookRegistration(
            hook=hook,
            priority=priority,
            predicate=predicate,
            operations=operations,
            enabled=enabled,
        )
        self._registrations.append(registration)
        self._registrations.sort(key=lambda r: r.priority)
        logger.debug("Registered instrumentation hook %r", hook)
        return registration

    def execute_all(
        self,
        operation: str,
        attributes: dict[str, Any],
        next_handler: Callable[[], Any],
    ) -> Any:
        """Execute all matching hooks in priority order around *next_handler*."""
        matching = [r for r in self._registrations if r.matches(operation, attributes)]
        if not matching:
            return next_handler()

        def pipeline(index: int = 0) -> Any:
            if index >= len(matching):
                return next_handler()
            registration = matching[index]
            return registration.hook(
                operation,
                attributes,
                lambda: pipeline(index + 1),
            )

        return pipeline()

    def clear(self) -> None:
        """Remove all registrations and clear caches."""
        for registration in self._registrations:
            registration.clear_cache()
        self._registrations.clear()


_hook_registry_var: ContextVar[HookRegistry | None] = ContextVar(
    "json_versioned_hook_registry", default=None
)


def get_hook_registry() -> HookRegistry:
    """Get the hook registry for the current context.

    Creates a fresh ``HookRegistry`` on first access within each context.
    """
    registry = _hook_registry_var.get()
    if registry is None:
        registry = HookRegistry()
        _hook_registry_var.set(registry)
    return registry


def set_hook_registry(registry: HookRegistry) -> None:
    """Set a custom hook registry in the current context."""
    _hook_registry_var.set(registry)
