"""Pytest fixtures for querycomplete tests."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

import pytest

_TEST_CONFIG_DIR = Path(tempfile.mkdtemp(prefix="querycomplete-test-config-"))
os.environ.setdefault("QUERYCOMPLETE_CONFIG_DIR", str(_TEST_CONFIG_DIR))


@pytest.fixture
def settings_path(tmp_path, monkeypatch):
    """Point the settings store at a fresh file for one test."""
    path = tmp_path / "settings.json"
    monkeypatch.setenv("QUERYCOMPLETE_SETTINGS_PATH", str(path))
    return path


@pytest.fixture
def shop_metadata():
    """A small e-commerce schema with one foreign key."""
    from querycomplete.sql_completion import SqlMetadata

    return SqlMetadata.from_dict(
        {
            "dialect": "postgres",
            "schemas": ["public", "audit"],
            "tables": [
                {"name": "users", "schema": "public", "rowCount": 1200},
                {"name": "orders", "schema": "public", "rowCount": 2_500_000},
                {"name": "events", "schema": "audit"},
            ],
            "columns": {
                "public.users": [
                    {"name": "id", "type": "integer", "isPrimaryKey": True, "nullable": False},
                    {"name": "email", "type": "varchar(255)"},
                    {"name": "status", "type": "text", "enumValues": ["active", "banned"]},
                    {"name": "created_at", "type": "timestamp"},
                ],
                "public.orders": [
                    {"name": "id", "type": "integer", "isPrimaryKey": True},
                    {
                        "name": "user_id",
                        "type": "integer",
                        "isForeignKey": True,
                        "foreignKeyRef": "users.id",
                    },
                    {"name": "total", "type": "numeric(10,2)"},
                ],
                "audit.events": [{"name": "payload", "type": "jsonb"}],
            },
            "foreignKeys": [
                {
                    "sourceTable": "orders",
                    "sourceColumn": "user_id",
                    "targetTable": "users",
                    "targetColumn": "id",
                    "constraintName": "orders_user_id_fkey",
                }
            ],
        }
    )


@pytest.fixture
def mongo_metadata():
    """Two collections with nested and array fields."""
    from querycomplete.mongo_completion import MongoMetadata

    return MongoMetadata.from_dict(
        {
            "collections": ["users", "orders", "user_sessions"],
            "fields": {
                "users": [
                    {"name": "_id", "type": "ObjectId"},
                    {"name": "name", "type": "string"},
                    {"name": "age", "type": "number"},
                    {
                        "name": "address",
                        "type": "object",
                        "nestedFields": [
                            {"name": "city", "type": "string"},
                            {"name": "zip", "type": "string"},
                        ],
                    },
                    {"name": "tags", "type": "string", "isArray": True},
                ],
                "orders": [
                    {"name": "_id", "type": "ObjectId"},
                    {"name": "status", "type": "string"},
                    {"name": "amount", "type": "number"},
                ],
            },
        }
    )
