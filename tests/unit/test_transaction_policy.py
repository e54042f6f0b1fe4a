"""Policy test: transactions are scoped with ``async with db.begin()``, never closed by hand."""

from __future__ import annotations

import ast
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[2]
CHECKED_DIRS = ("app/routes", "app/services", "app/cli")


def _explicit_transaction_calls(path: Path) -> list[int]:
    tree = ast.parse(path.read_text(encoding="utf-8"), filename=str(path))
    return [
        node.lineno
        for node in ast.walk(tree)
        if isinstance(node, ast.Call)
        and isinstance(node.func, ast.Attribute)
        and node.func.attr in {"commit", "rollback"}
    ]


def test_app_code_has_no_explicit_commit_or_rollback() -> None:
    violations = [
        f"{path.relative_to(REPO_ROOT)}:{lineno}"
        for directory in CHECKED_DIRS
        for path in sorted((REPO_ROOT / directory).rglob("*.py"))
        for lineno in _explicit_transaction_calls(path)
    ]

    assert not violations, (
        "Explicit commit()/rollback() calls found; use `async with db.begin()`:\n"
        + "\n".join(violations)
    )
