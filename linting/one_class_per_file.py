#!/usr/bin/env python
"""Enforce one top-level behavioral class per sync_bridge module.

Dataclasses, enums and exception types do not count: they are plain data or
error markers and may be grouped with the class that uses them.
"""

from __future__ import annotations

import ast
import sys
import argparse
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
PACKAGE_DIR = ROOT / "sync_bridge"

_EXEMPT_BASES = {"Exception", "BaseException", "Enum", "IntEnum", "StrEnum"}


def _decorator_name(decorator: ast.expr) -> str | None:
    target: ast.expr = decorator.func if isinstance(decorator, ast.Call) else decorator
    if isinstance(target, ast.Name):
        return target.id
    if isinstance(target, ast.Attribute):
        return target.attr
    return None


def _base_name(base: ast.expr) -> str | None:
    if isinstance(base, ast.Name):
        return base.id
    if isinstance(base, ast.Attribute):
        return base.attr
    return None


def _is_exempt(node: ast.ClassDef, exempt_names: set[str]) -> bool:
    if any(_decorator_name(d) == "dataclass" for d in node.decorator_list):
        return True
    for base in node.bases:
        name = _base_name(base)
        if name is None:
            continue
        if name in _EXEMPT_BASES or name in exempt_names or name.endswith("Error"):
            return True
    return False


def _collect_counted_classes(filepath: Path) -> list[str]:
    try:
        tree = ast.parse(filepath.read_text(encoding="utf-8"), filename=str(filepath))
    except (OSError, UnicodeDecodeError, SyntaxError):
        return []

    # Subclasses of an exempt class defined earlier in the module are exempt too.
    exempt_names: set[str] = set()
    counted: list[str] = []
    for node in tree.body:
        if not isinstance(node, ast.ClassDef):
            continue
        if _is_exempt(node, exempt_names):
            exempt_names.add(node.name)
            continue
        counted.append(node.name)
    return counted


def main() -> int:
    parser = argparse.ArgumentParser(description="Enforce one behavioral class per module.")
    parser.add_argument("--dir", default=str(PACKAGE_DIR), help="Package directory to scan")
    args = parser.parse_args()

    scan_dir = Path(args.dir).resolve()
    violations: list[str] = []
    for py_file in sorted(scan_dir.rglob("*.py")):
        if "__pycache__" in py_file.parts:
            continue
        classes = _collect_counted_classes(py_file)
        if len(classes) > 1:
            violations.append(f"  {py_file.relative_to(ROOT)}: {len(classes)} classes ({', '.join(classes)})")

    if violations:
        print("One-class-per-module violations:", file=sys.stderr)
        for violation in violations:
            print(violation, file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
