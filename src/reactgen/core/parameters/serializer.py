# どこで: `src/reactgen/core/parameters/serializer.py`。
# 何を: Value 1 項を Python ソーステキストへ変換し、インスタンス参照パスを組み立てる。
# なぜ: リテラル/時間/参照の書き出し規則を resolver/emitter から切り離すため。

from __future__ import annotations

from reactgen.core.codegen_config import CodegenConfig, codegen_config
from reactgen.core.model.declarations import TIME_UNIT_MACROS, Value, ValueKind
from reactgen.core.model.instances import Instantiation

_BOOL_LITERALS = {"true": "True", "false": "False"}


def path_to(node: Instantiation, *, config: CodegenConfig | None = None) -> str:
    """node の reactor インスタンスを指す参照名を返す（例: `main_mid_lf`）。"""

    cfg = codegen_config() if config is None else config
    return node.full_name.replace(".", "_") + cfg.reference_suffix


def _serialize_literal(text: str) -> str:
    stripped = text.strip()
    if stripped.lower() in _BOOL_LITERALS:
        return _BOOL_LITERALS[stripped.lower()]
    if stripped.startswith("{=") and stripped.endswith("=}"):
        return stripped[2:-2].strip()
    return text


def _serialize_time(value: Value) -> str:
    magnitude = value.magnitude
    if magnitude is None or isinstance(magnitude, bool):
        raise ValueError(f"時間値の大きさが不正: {value!r}")
    if value.unit is None:
        # 単位無しは 0 のみ許す。
        if magnitude != 0:
            raise ValueError(f"単位の無い時間値は 0 のみ: got={magnitude!r}")
        return "0"
    macro = TIME_UNIT_MACROS.get(value.unit.strip().lower())
    if macro is None:
        raise ValueError(f"未知の時間単位: {value.unit!r}")
    return f"{macro}({magnitude})"


def serialize_value(
    value: Value,
    scope: Instantiation | None,
    *,
    config: CodegenConfig | None = None,
) -> str:
    """Value を Python ソーステキストへ変換して返す。

    Parameters
    ----------
    value : Value
        変換対象の項。
    scope : Instantiation or None
        ParameterRef を解決するスコープ。None は宣言スコープ（クラス本体）を表し、
        参照は `self.<prefix><name>` になる。
    config : CodegenConfig or None, optional
        None の場合は `codegen_config()` を使う。

    Raises
    ------
    ValueError
        value が不正な形の場合。
    """

    cfg = codegen_config() if config is None else config
    if value.kind is ValueKind.LITERAL:
        if value.literal is None:
            raise ValueError(f"リテラルのテキストが無い: {value!r}")
        return _serialize_literal(value.literal)
    if value.kind is ValueKind.TIME:
        return _serialize_time(value)
    if value.kind is ValueKind.PARAMETER:
        if value.parameter is None:
            raise ValueError(f"参照先パラメータが無い: {value!r}")
        if scope is None:
            return f"self.{cfg.field_prefix}{value.parameter.name}"
        return f"{path_to(scope, config=cfg)}.{value.parameter.name}"
    raise ValueError(f"未知の Value.kind: {value.kind!r}")


__all__ = ["path_to", "serialize_value"]
