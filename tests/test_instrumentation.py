from __future__ import annotations

import json
from typing import Any

import pytest

from json_versioned import (
    HookRegistry,
    InstrumentationHook,
    MissingMigrationError,
    VersionedCodec,
    create_codec,
    get_hook_registry,
    set_hook_registry,
)


class RecordingHook:
    def __init__(self, name: str, order: list[str]) -> None:
        self._name = name
        self._order = order

    def __call__(
        self,
        operation: str,
        _attributes: dict[str, Any],
        next_handler: Any,
    ) -> Any:
        self._order.append(f"before:{self._name}:{operation}")
        result = next_handler()
        self._order.append(f"after:{self._name}:{operation}")
        return result


def test_hook_registry_executes_in_priority_order() -> None:
    order: list[str] = []
    registry = HookRegistry()
    registry.register(RecordingHook("inner", order), priority=0)
    registry.register(RecordingHook("outer", order), priority=-10)

    def _handler() -> str:
        order.append("handler")
        return "ok"

    result = registry.execute_all("op", {}, _handler)

    assert result == "ok"
    assert order == [
        "before:outer:op",
        "before:inner:op",
        "handler",
        "after:inner:op",
        "after:outer:op",
    ]


def test_operation_patterns_filter_hooks() -> None:
    order: list[str] = []
    registry = HookRegistry()
    registry.register(RecordingHook("migrate", order), operations=["versioning.migrate.*"])

    registry.execute_all("versioning.serialize", {}, lambda: None)
    registry.execute_all("versioning.migrate.1", {}, lambda: None)

    assert order == [
        "before:migrate:versioning.migrate.1",
        "after:migrate:versioning.migrate.1",
    ]


def test_predicate_and_disabled_registrations() -> None:
    order: list[str] = []
    registry = HookRegistry()
    registry.register(
        RecordingHook("pred", order),
        predicate=lambda _op, attrs: attrs.get("schema.from") == 2,
    )
    registry.register(RecordingHook("off", order), enabled=False)

    registry.execute_all("x", {"schema.from": 1}, lambda: None)
    registry.execute_all("x", {"schema.from": 2}, lambda: None)

    assert order == ["before:pred:x", "after:pred:x"]


def test_empty_or_disabled_registry_is_falsy() -> None:
    registry = HookRegistry()
    assert not registry

    registration = registry.register(RecordingHook("a", []))
    assert registry

    registration.enabled = False
    assert not registry


def test_clear_removes_hooks() -> None:
    registry = HookRegistry()
    registry.register(RecordingHook("a", []))

    registry.clear()

    assert not registry


def test_recording_hook_satisfies_protocol() -> None:
    assert isinstance(RecordingHook("a", []), InstrumentationHook)


def test_context_registry_roundtrip() -> None:
    registry = HookRegistry()

    set_hook_registry(registry)

    assert get_hook_registry() is registry


class TestCodecHooks:
    def test_deserialize_emits_one_operation_per_step(self) -> None:
        order: list[str] = []
        hooks = HookRegistry()
        hooks.register(RecordingHook("h", order))
        codec: VersionedCodec[Any] = VersionedCodec(
            3, [(2, lambda d: d), (3, lambda d: d)], hooks=hooks
        )

        codec.deserialize(b'{"version":1,"data":{}}')

        assert order == [
            "before:h:versioning.deserialize",
            "before:h:versioning.migrate.1",
            "after:h:versioning.migrate.1",
            "before:h:versioning.migrate.2",
            "after:h:versioning.migrate.2",
            "after:h:versioning.deserialize",
        ]

    def test_fast_path_emits_no_migrate_operation(self) -> None:
        order: list[str] = []
        hooks = HookRegistry()
        hooks.register(RecordingHook("h", order), operations=["versioning.migrate.*"])
        codec = create_codec(2, [(2, lambda d: d)], hooks=hooks)

        codec.deserialize(b'{"version":2,"data":{}}')

        assert order == []

    def test_migrate_attributes(self) -> None:
        seen: list[dict[str, Any]] = []

        def capture(operation: str, attributes: dict[str, Any], next_handler: Any) -> Any:
            seen.append(dict(attributes))
            return next_handler()

        hooks = HookRegistry()
        hooks.register(capture, operations=["versioning.migrate.*"])
        codec = create_codec(2, [(2, lambda d: d)], hooks=hooks)

        codec.deserialize(b'{"version":1,"data":{}}')

        assert seen == [{"schema.from": 1, "schema.to": 2, "schema.current": 2}]

    def test_hook_can_replace_serialized_output(self) -> None:
        def stamp(operation: str, attributes: dict[str, Any], next_handler: Any) -> Any:
            return next_handler() + b"\n"

        hooks = HookRegistry()
        hooks.register(stamp, operations=["versioning.serialize"])
        codec = create_codec(1, hooks=hooks)

        raw = codec.serialize({"a": 1})

        assert raw.endswith(b"\n")
        assert json.loads(raw) == {"version": 1, "data": {"a": 1}}

    def test_hook_errors_propagate(self) -> None:
        def failing(operation: str, attributes: dict[str, Any], next_handler: Any) -> Any:
            raise RuntimeError("hook failed")

        hooks = HookRegistry()
        hooks.register(failing)

        with pytest.raises(RuntimeError, match="hook failed"):
            create_codec(1, hooks=hooks).serialize({})

    def test_context_registry_used_by_default(self) -> None:
        order: list[str] = []
        get_hook_registry().register(RecordingHook("ctx", order))

        create_codec(1).serialize({})

        assert order == [
            "before:ctx:versioning.serialize",
            "after:ctx:versioning.serialize",
        ]

    def test_missing_migration_raised_before_step_hooks(self) -> None:
        order: list[str] = []
        hooks = HookRegistry()
        hooks.register(RecordingHook("h", order), operations=["versioning.migrate.*"])
        codec = create_codec(3, [(3, lambda d: d)], hooks=hooks)

        with pytest.raises(MissingMigrationError):
            codec.deserialize(b'{"version":1,"data":{}}')

        assert order == []
