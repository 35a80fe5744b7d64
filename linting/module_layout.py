#!/usr/bin/env python
"""Check the package's module layout conventions.

Per module (top level only):
- at most one class that is not a dataclass
- ``__all__``, when present, is a single plain assignment and the last statement

Exits non-zero and lists offending modules on stderr.
"""

from __future__ import annotations

import ast
import sys
import argparse
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]


def _decorator_name(decorator: ast.expr) -> str:
    target = decorator.func if isinstance(decorator, ast.Call) else decorator
    if isinstance(target, ast.Name):
        return target.id
    if isinstance(target, ast.Attribute):
        return target.attr
    return ""


def _plain_classes(tree: ast.Module) -> list[str]:
    return [
        node.name
        for node in tree.body
        if isinstance(node, ast.ClassDef)
        and not any(_decorator_name(d) == "dataclass" for d in node.decorator_list)
    ]


def _assigns_all(node: ast.stmt) -> bool:
    if isinstance(node, ast.Assign):
        return any(isinstance(t, ast.Name) and t.id == "__all__" for t in node.targets)
    if isinstance(node, (ast.AnnAssign, ast.AugAssign)):
        return isinstance(node.target, ast.Name) and node.target.id == "__all__"
    return False


def check_source(source: str, label: str) -> list[str]:
    try:
        tree = ast.parse(source, filename=label)
    except SyntaxError as exc:
        return [f"  {label}: cannot parse ({exc.msg})"]

    problems: list[str] = []
    classes = _plain_classes(tree)
    if len(classes) > 1:
        problems.append(f"  {label}: {len(classes)} classes ({', '.join(classes)})")

    positions = [idx for idx, node in enumerate(tree.body) if _assigns_all(node)]
    if len(positions) > 1:
        problems.append(f"  {label}: `__all__` assigned {len(positions)} times")
    elif positions:
        node = tree.body[positions[0]]
        if not isinstance(node, ast.Assign) or len(node.targets) != 1:
            problems.append(f"  {label}:{node.lineno} `__all__` must be a plain assignment")
        trailing = tree.body[positions[0] + 1 :]
        if trailing:
            problems.append(f"  {label}:{trailing[0].lineno} statement after `__all__`")
    return problems


def check_tree(package_dir: Path) -> list[str]:
    problems: list[str] = []
    for py_file in sorted(package_dir.rglob("*.py")):
        if "__pycache__" in py_file.parts:
            continue
        try:
            source = py_file.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError):
            continue
        try:
            label = str(py_file.relative_to(ROOT))
        except ValueError:
            label = str(py_file)
        problems.extend(check_source(source, label))
    return problems


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Check one-class-per-module and __all__ placement.")
    parser.add_argument("--dirs", nargs="+", default=["domsync"], help="Directories to scan (default: domsync)")
    args = parser.parse_args(argv)

    problems: list[str] = []
    for d in args.dirs:
        scan_dir = (ROOT / d).resolve()
        if scan_dir.is_dir():
            problems.extend(check_tree(scan_dir))

    if problems:
        print("Module layout violations:", file=sys.stderr)
        for problem in problems:
            print(problem, file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
