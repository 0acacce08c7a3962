from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable

import pytest

from rpc_typegen.codegen.core.config import GeneratorConfig
from rpc_typegen.codegen.languages.typescript import (
    TypeScriptGenerator,
    create_typescript_generator,
)


@pytest.fixture
def make_generator() -> Callable[..., TypeScriptGenerator]:
    """Build a TypeScript generator; keyword arguments override config fields."""

    def _make(**overrides: Any) -> TypeScriptGenerator:
        return create_typescript_generator(GeneratorConfig(), **overrides)

    return _make


@pytest.fixture
def write_unit(tmp_path: Path) -> Callable[..., Path]:
    """Write a syntax-tree document under tmp_path and return its path."""

    def _write(name: str, items: list[Any], unit_path: str | None = None) -> Path:
        target = tmp_path / name
        target.parent.mkdir(parents=True, exist_ok=True)
        document: dict[str, Any] = {"items": items}
        if unit_path is not None:
            document["path"] = unit_path
        target.write_text(json.dumps(document), encoding="utf-8")
        return target

    return _write
