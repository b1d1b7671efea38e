"""Pytest configuration and fixtures."""

import json
from pathlib import Path
from typing import Any

import pytest


def write_json(path: Path, value: Any) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(value), encoding="utf-8")
    return path


@pytest.fixture
def users_api() -> dict[str, Any]:
    """Provider spec with a shared schema behind a $ref."""
    return {
        "openapi": "3.0.0",
        "info": {"title": "API", "version": "1.0.0"},
        "paths": {
            "/users": {
                "get": {
                    "operationId": "getUsers",
                    "responses": {
                        "200": {
                            "description": "OK",
                            "content": {
                                "application/json": {
                                    "schema": {
                                        "type": "array",
                                        "items": {"$ref": "#/components/schemas/User"},
                                    }
                                }
                            },
                        }
                    },
                }
            },
            "/users/{id}": {
                "get": {
                    "operationId": "getUser",
                    "parameters": [
                        {"name": "id", "in": "path", "required": True, "schema": {"type": "string"}}
                    ],
                    "responses": {
                        "200": {
                            "description": "OK",
                            "content": {
                                "application/json": {
                                    "schema": {"$ref": "#/components/schemas/User"}
                                }
                            },
                        }
                    },
                }
            },
        },
        "components": {
            "schemas": {
                "User": {
                    "type": "object",
                    "required": ["id"],
                    "properties": {
                        "id": {"type": "string"},
                        "name": {"type": "string"},
                    },
                }
            }
        },
    }


@pytest.fixture
def contracts_dir(tmp_path: Path) -> Path:
    """Contracts root with one provider and one consumer contract."""
    write_json(
        tmp_path / "provider" / "api-v1.json",
        {
            "openapi": "3.0.0",
            "info": {"title": "API", "version": "1.0.0"},
            "paths": {"/users": {"get": {"operationId": "getUsers"}}},
        },
    )
    write_json(
        tmp_path / "consumer" / "mobile.json",
        {
            "openapi": "3.0.0",
            "info": {"title": "Mobile Consumer", "version": "1.0.0"},
            "paths": {"/users": {"get": {"operationId": "getUsers"}}},
        },
    )
    return tmp_path
