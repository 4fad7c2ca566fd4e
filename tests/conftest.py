"""Shared fixtures: a three-version user schema."""

from __future__ import annotations

from typing import Any

import pytest

from json_versioned import (
    HookRegistry,
    MigrationStep,
    VersionedCodec,
    VersionedSchema,
    set_hook_registry,
)


def split_name(data: dict[str, Any]) -> dict[str, Any]:
    """v1 → v2: ``name`` becomes ``firstName`` / ``lastName``."""
    first_name, _, last_name = data["name"].partition(" ")
    return {"firstName": first_name, "lastName": last_name, "age": data["age"]}


def add_email(data: dict[str, Any]) -> dict[str, Any]:
    """v2 → v3: derive ``email`` from the name."""
    return {
        **data,
        "email": f"{data['firstName']}.{data['lastName']}@example.com".lower(),
    }


@pytest.fixture(autouse=True)
def _fresh_hook_registry() -> None:
    """Give every test its own context-level hook registry."""
    set_hook_registry(HookRegistry())


@pytest.fixture
def user_v1() -> dict[str, Any]:
    return {"name": "John Doe", "age": 30}


@pytest.fixture
def user_v3() -> dict[str, Any]:
    return {
        "firstName": "John",
        "lastName": "Doe",
        "age": 30,
        "email": "john.doe@example.com",
    }


@pytest.fixture
def user_schema() -> VersionedSchema:
    return VersionedSchema(3).with_migration(2, split_name).with_migration(3, add_email)


@pytest.fixture
def user_codec() -> VersionedCodec[dict[str, Any]]:
    return VersionedCodec(3, [MigrationStep(2, split_name), MigrationStep(3, add_email)])
