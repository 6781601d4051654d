"""Dependency direction guardrails for backend modules.

The deterministic engine must stay importable without the web or LLM layers:
main -> llm_service -> profile_engine -> relation_engine -> hangul_engine -> sipsung -> ganji_tables
and never the reverse.
"""

from __future__ import annotations

import ast
from pathlib import Path
import unittest


BACKEND_DIR = Path(__file__).resolve().parent

ENGINE_MODULES = (
    "ganji_tables.py",
    "sipsung.py",
    "hangul_engine.py",
    "relation_engine.py",
    "profile_engine.py",
    "saju_year.py",
)

OUTER_LAYERS = (
    "backend.main",
    "main",
    "backend.llm_service",
    "llm_service",
    "openai",
    "fastapi",
    "httpx",
)


def _imported_modules(py_file: Path) -> set[str]:
    tree = ast.parse(py_file.read_text(encoding="utf-8"))
    modules: set[str] = set()
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            for alias in node.names:
                modules.add(alias.name)
        elif isinstance(node, ast.ImportFrom):
            if node.module:
                modules.add(node.module)
    return modules


class TestDependencyDirection(unittest.TestCase):
    def test_engine_modules_do_not_import_outer_layers(self) -> None:
        for name in ENGINE_MODULES:
            modules = _imported_modules(BACKEND_DIR / name)
            for outer in OUTER_LAYERS:
                with self.subTest(module=name, outer=outer):
                    self.assertNotIn(outer, modules)

    def test_tables_do_not_import_engines(self) -> None:
        modules = _imported_modules(BACKEND_DIR / "ganji_tables.py")
        self.assertFalse({m for m in modules if m.startswith("backend.")})

    def test_relation_engine_does_not_import_profile_engine(self) -> None:
        modules = _imported_modules(BACKEND_DIR / "relation_engine.py")
        self.assertNotIn("backend.profile_engine", modules)


if __name__ == "__main__":
    unittest.main()
