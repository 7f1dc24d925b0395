"""依存境界（model / parameters / config）の破りを検出するテスト。"""

from __future__ import annotations

import ast
from pathlib import Path


def _src_root() -> Path:
    path = Path(__file__).resolve()
    for parent in path.parents:
        if (parent / "src").is_dir() and (parent / "tests").is_dir():
            return parent / "src"
    raise RuntimeError("repo root が見つからない")


def _module_name(path: Path, src_root: Path) -> tuple[str, bool]:
    parts = list(path.relative_to(src_root).parts)
    is_package = parts[-1] == "__init__.py"
    if is_package:
        parts = parts[:-1]
    else:
        parts[-1] = parts[-1].removesuffix(".py")
    return ".".join(parts), is_package


def _importfrom_base(current_module: str, is_package: bool, node: ast.ImportFrom) -> str:
    level = int(node.level or 0)
    if level == 0:
        return str(node.module or "")
    package = current_module if is_package else current_module.rsplit(".", 1)[0]
    parts = package.split(".")
    if level - 1 >= len(parts):
        raise ValueError(f"相対 import の解決に失敗: module={current_module!r} level={level}")
    base = ".".join(parts[: len(parts) - (level - 1)])
    return f"{base}.{node.module}" if node.module else base


def _imported_modules(path: Path, src_root: Path) -> set[str]:
    current_module, is_package = _module_name(path, src_root)
    modules: set[str] = set()
    for node in ast.walk(ast.parse(path.read_text(encoding="utf-8"))):
        if isinstance(node, ast.Import):
            modules.update(alias.name for alias in node.names)
        elif isinstance(node, ast.ImportFrom):
            base = _importfrom_base(current_module, is_package, node)
            modules.add(base)
            modules.update(f"{base}.{a.name}" for a in node.names if a.name != "*")
    return modules


def _assert_no_forbidden_imports(package_dir: Path, forbidden_prefixes: tuple[str, ...]) -> None:
    src_root = _src_root()
    violations: list[str] = []
    for path in sorted(package_dir.rglob("*.py")):
        bad = sorted(m for m in _imported_modules(path, src_root) if m.startswith(forbidden_prefixes))
        if bad:
            violations.append(f"{path.relative_to(src_root)}: {', '.join(bad)}")
    if violations:
        joined = "\n".join(violations)
        raise AssertionError(f"依存境界違反の import を検出:\n{joined}")


def test_model_does_not_depend_on_parameters() -> None:
    _assert_no_forbidden_imports(
        _src_root() / "reactgen" / "core" / "model",
        ("reactgen.core.parameters", "reactgen.core.codegen_config"),
    )


def test_leaf_modules_do_not_depend_on_the_engine() -> None:
    src = _src_root() / "reactgen" / "core"
    for leaf in ("strutil.py", "codegen_config.py"):
        bad = sorted(
            m
            for m in _imported_modules(src / leaf, _src_root())
            if m.startswith(("reactgen.core.model", "reactgen.core.parameters"))
        )
        assert bad == [], f"{leaf}: {bad}"


def test_relative_imports_resolve_to_sibling_modules() -> None:
    node = ast.parse("from .serializer import path_to\n").body[0]
    assert isinstance(node, ast.ImportFrom)
    assert (
        _importfrom_base("reactgen.core.parameters.resolver", False, node)
        == "reactgen.core.parameters.serializer"
    )

    node = ast.parse("from ..model import Value\n").body[0]
    assert isinstance(node, ast.ImportFrom)
    assert _importfrom_base("reactgen.core.parameters", True, node) == "reactgen.core.model"
