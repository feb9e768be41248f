# topmark:header:start
#
#   project      : ThrowLine
#   file         : test_packaging.py
#   file_relpath : tests/api/test_packaging.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Checks that the project automation loads on every supported Python."""

from __future__ import annotations

import ast
from pathlib import Path
from typing import Any

import tomlkit

ROOT: Path = Path(__file__).resolve().parents[2]


def _version_guarded(node: ast.If) -> bool:
    """Return True if ``node`` tests ``sys.version_info >= (3, 11)``."""
    test: ast.expr = node.test
    return (
        isinstance(test, ast.Compare)
        and ast.unparse(test.left) == "sys.version_info"
        and isinstance(test.ops[0], ast.GtE)
        and ast.unparse(test.comparators[0]) == "(3, 11)"
    )


def _unguarded_tomllib_imports(source: str) -> list[int]:
    """Return line numbers of `tomllib` imports outside a 3.11+ version guard."""
    tree: ast.Module = ast.parse(source)
    guarded: set[int] = set()
    for node in ast.walk(tree):
        if isinstance(node, ast.If) and _version_guarded(node):
            guarded.update(id(child) for stmt in node.body for child in ast.walk(stmt))

    lines: list[int] = []
    for node in ast.walk(tree):
        if id(node) in guarded:
            continue
        if isinstance(node, ast.Import) and any(a.name == "tomllib" for a in node.names):
            lines.append(node.lineno)
        elif isinstance(node, ast.ImportFrom) and node.module == "tomllib":
            lines.append(node.lineno)
    return lines


def test_python_310_is_supported() -> None:
    """The package metadata still advertises Python 3.10."""
    project: Any = tomlkit.parse((ROOT / "pyproject.toml").read_text(encoding="utf-8"))["project"]
    assert str(project["requires-python"]) == ">=3.10"
    assert "Programming Language :: Python :: 3.10" in [str(c) for c in project["classifiers"]]


def test_noxfile_guards_tomllib_import() -> None:
    """``tomllib`` only exists on 3.11+, so the noxfile imports it behind a version check."""
    source: str = (ROOT / "noxfile.py").read_text(encoding="utf-8")
    assert _unguarded_tomllib_imports(source) == []
    assert "import toml\n" in source


def test_unguarded_tomllib_import_is_detected() -> None:
    """A bare module-level ``import tomllib`` is reported."""
    assert _unguarded_tomllib_imports("import sys\nimport tomllib\n") == [2]
    assert (
        _unguarded_tomllib_imports(
            "import sys\nif sys.version_info >= (3, 11):\n    import tomllib\n"
        )
        == []
    )
