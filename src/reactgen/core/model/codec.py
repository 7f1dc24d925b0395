# どこで: `src/reactgen/core/model/codec.py`。
# 何を: dict / YAML テキスト / ファイルから DeclarationTable と InstantiationTree を構築する。
# なぜ: パーサ無しでもプログラム記述から宣言と木を組み立て、生成器とテストで共有するため。

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from .declarations import (
    TIME_UNIT_MACROS,
    DeclarationTable,
    Parameter,
    ReactorDeclaration,
    Value,
    all_parameters,
)
from .instances import Assignment, Instantiation, InstantiationTree, SourceLocation

_TIME_TEXT = re.compile(r"^\s*(-?\d+(?:\.\d+)?)\s+([A-Za-z]+)\s*$")
_DEFAULT_SOURCE = "<program>"


@dataclass(frozen=True, slots=True)
class LoadedProgram:
    declarations: DeclarationTable
    tree: InstantiationTree


def _require_mapping(obj: object, *, path: str) -> dict[str, Any]:
    if not isinstance(obj, dict):
        raise TypeError(f"{path} は mapping である必要がある: got={obj!r}")
    return obj


def _require_list(obj: object, *, path: str) -> list[Any]:
    if obj is None:
        return []
    if not isinstance(obj, list):
        raise TypeError(f"{path} は list である必要がある: got={obj!r}")
    return obj


def _require_name(obj: object, *, path: str) -> str:
    if not isinstance(obj, str) or not obj.strip():
        raise ValueError(f"{path} は空でない文字列である必要がある: got={obj!r}")
    return obj.strip()


def _lookup_parameter(params: tuple[Parameter, ...], name: str, *, path: str) -> Parameter:
    # 同名がある場合は後に宣言された方を採る。
    for param in reversed(params):
        if param.name == name:
            return param
    raise ValueError(f"{path}: パラメータ '{name}' が見つからない")


def _time_magnitude(text: str) -> int | float:
    return float(text) if "." in text else int(text)


def _require_time_unit(unit: str, *, path: str) -> str:
    if unit.strip().lower() not in TIME_UNIT_MACROS:
        raise ValueError(f"{path}: 未知の時間単位: {unit!r}")
    return unit


def _decode_value(item: object, scope: tuple[Parameter, ...], *, path: str) -> Value:
    """1 項を Value に変換する。ParameterRef は scope から名前で引く。

    Notes
    -----
    文字列はそのまま生成コードへ書き出されるリテラルテキストとして扱う。
    生成側で文字列リテラルにしたい場合は `'"hello"'` のように引用符ごと書く。
    `"10 msec"` の形は時間値として解釈し、単位は `TIME_UNIT_MACROS` で検査する。
    """

    if isinstance(item, bool):
        return Value.of_literal("true" if item else "false")
    if isinstance(item, (int, float)):
        return Value.of_literal(repr(item))
    if isinstance(item, str):
        m = _TIME_TEXT.match(item)
        if m is not None:
            unit = _require_time_unit(m.group(2), path=path)
            return Value.of_time(_time_magnitude(m.group(1)), unit)
        return Value.of_literal(item)
    if isinstance(item, dict):
        if "param" in item:
            name = _require_name(item["param"], path=f"{path}.param")
            return Value.of_parameter(_lookup_parameter(scope, name, path=path))
        if "time" in item:
            magnitude = item["time"]
            if isinstance(magnitude, bool) or not isinstance(magnitude, (int, float)):
                raise ValueError(f"{path}.time は数値である必要がある: got={magnitude!r}")
            unit = item.get("unit")
            if unit is not None and not isinstance(unit, str):
                raise ValueError(f"{path}.unit は文字列である必要がある: got={unit!r}")
            if unit is not None:
                unit = _require_time_unit(unit, path=f"{path}.unit")
            elif magnitude != 0:
                raise ValueError(f"{path}: 単位の無い時間値は 0 のみ: got={magnitude!r}")
            return Value.of_time(magnitude, unit)
        if "code" in item:
            return Value.of_literal("{=" + str(item["code"]) + "=}")
    raise ValueError(f"{path}: 解釈できない値: {item!r}")


def _decode_values(
    obj: object, scope: tuple[Parameter, ...], *, path: str
) -> tuple[Value, ...]:
    items = obj if isinstance(obj, list) else [obj]
    if not items:
        raise ValueError(f"{path} は 1 項以上が必要")
    return tuple(_decode_value(v, scope, path=f"{path}[{i}]") for i, v in enumerate(items))


def _decode_reactor(
    obj: object, known: dict[str, ReactorDeclaration], *, path: str
) -> ReactorDeclaration:
    item = _require_mapping(obj, path=path)
    name = _require_name(item.get("name"), path=f"{path}.name")
    if name in known:
        raise ValueError(f"{path}: reactor '{name}' は既に宣言されている")

    bases: list[ReactorDeclaration] = []
    for i, base_name in enumerate(_require_list(item.get("extends"), path=f"{path}.extends")):
        base_name = _require_name(base_name, path=f"{path}.extends[{i}]")
        if base_name not in known:
            raise ValueError(f"{path}: 基底 reactor '{base_name}' はこれより前に宣言する必要がある")
        bases.append(known[base_name])

    inherited: list[Parameter] = []
    for base in bases:
        inherited.extend(all_parameters(base))

    params: list[Parameter] = []
    for i, raw in enumerate(_require_list(item.get("parameters"), path=f"{path}.parameters")):
        p_path = f"{path}.parameters[{i}]"
        p_item = _require_mapping(raw, path=p_path)
        p_name = _require_name(p_item.get("name"), path=f"{p_path}.name")
        p_type = p_item.get("type")
        if p_type is not None and not isinstance(p_type, str):
            raise ValueError(f"{p_path}.type は文字列である必要がある: got={p_type!r}")
        if "init" not in p_item:
            raise ValueError(f"{p_path}.init が未設定")
        # 既定値の参照は、継承分とこれより前に宣言された自身のパラメータから引く。
        scope = tuple(inherited + params)
        init = _decode_values(p_item["init"], scope, path=f"{p_path}.init")
        params.append(Parameter(name=p_name, type=p_type, init=init))

    return ReactorDeclaration(name=name, parameters=tuple(params), superclasses=tuple(bases))


def _decode_instance(
    obj: object,
    declarations: DeclarationTable,
    tree: InstantiationTree,
    *,
    parent: Instantiation | None,
    source: str,
    path: str,
) -> Instantiation:
    item = _require_mapping(obj, path=path)
    name = _require_name(item.get("name"), path=f"{path}.name")
    reactor_name = _require_name(item.get("reactor"), path=f"{path}.reactor")
    if reactor_name not in declarations:
        raise ValueError(f"{path}: reactor '{reactor_name}' は宣言されていない")
    reactor = declarations[reactor_name]

    # 右辺はインスタンス化を行う側（親）の字句スコープで書かれる。
    lexical_scope = all_parameters(parent.reactor) if parent is not None else ()
    own_params = all_parameters(reactor)
    assignments: list[Assignment] = []
    for i, raw in enumerate(_require_list(item.get("assignments"), path=f"{path}.assignments")):
        a_path = f"{path}.assignments[{i}]"
        a_item = _require_mapping(raw, path=a_path)
        lhs_name = _require_name(a_item.get("lhs"), path=f"{a_path}.lhs")
        lhs = _lookup_parameter(own_params, lhs_name, path=a_path)
        if "rhs" not in a_item:
            raise ValueError(f"{a_path}.rhs が未設定")
        rhs = _decode_values(a_item["rhs"], lexical_scope, path=f"{a_path}.rhs")
        line = a_item.get("line")
        location = SourceLocation(file=source, line=int(line)) if line is not None else None
        assignments.append(Assignment(lhs=lhs, rhs=rhs, location=location))

    node = tree.add(name, reactor, parent=parent, assignments=assignments)
    for i, child in enumerate(_require_list(item.get("children"), path=f"{path}.children")):
        _decode_instance(
            child,
            declarations,
            tree,
            parent=node,
            source=source,
            path=f"{path}.children[{i}]",
        )
    return node


def decode_program(obj: object, *, source: str | None = None) -> LoadedProgram:
    """dict 形式のプログラム記述から LoadedProgram を構築して返す。

    Raises
    ------
    TypeError
        構造（mapping/list）の型が合わない場合。
    ValueError
        名前の未解決・重複などの意味的な問題がある場合。
    """

    root = _require_mapping(obj, path="<root>")
    src = source or str(root.get("source") or _DEFAULT_SOURCE)

    known: dict[str, ReactorDeclaration] = {}
    for i, raw in enumerate(_require_list(root.get("reactors"), path="reactors")):
        decl = _decode_reactor(raw, known, path=f"reactors[{i}]")
        known[decl.name] = decl
    declarations = DeclarationTable(known.values())

    tree = InstantiationTree()
    main = root.get("main")
    if main is not None:
        _decode_instance(main, declarations, tree, parent=None, source=src, path="main")
    return LoadedProgram(declarations=declarations, tree=tree)


def loads_program(payload: str, *, source: str | None = None) -> LoadedProgram:
    """YAML 文字列から LoadedProgram を構築して返す。"""

    return decode_program(yaml.safe_load(payload), source=source)


def load_program(path: str | Path) -> LoadedProgram:
    """YAML ファイルから LoadedProgram を構築して返す。"""

    p = Path(path)
    return loads_program(p.read_text(encoding="utf-8"), source=str(p))


__all__ = ["LoadedProgram", "decode_program", "load_program", "loads_program"]
