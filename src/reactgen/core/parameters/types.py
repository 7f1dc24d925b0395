# どこで: `src/reactgen/core/parameters/types.py`。
# 何を: 宣言型をターゲット（Python）の型注釈テキストへ写像する。
# なぜ: 型注釈を付けるか省くかの判断を 1 箇所へ閉じるため。

from __future__ import annotations

from enum import Enum
from typing import Final

from reactgen.core.model.declarations import Parameter
from reactgen.core.strutil import remove_quotes


class NoExplicitType(Enum):
    """明示型なしを表す番兵の型。"""

    NO_EXPLICIT_TYPE = "no_explicit_type"

    def __repr__(self) -> str:
        return "NO_EXPLICIT_TYPE"


NO_EXPLICIT_TYPE: Final = NoExplicitType.NO_EXPLICIT_TYPE

_PYTHON_TYPES: dict[str, str] = {
    "int": "int",
    "float": "float",
    "double": "float",
    "bool": "bool",
    "string": "str",
    "time": "int",
}


def _strip_code_delimiters(text: str) -> str:
    if text.startswith("{=") and text.endswith("=}"):
        return text[2:-2].strip()
    return text


def target_type(parameter: Parameter) -> str | NoExplicitType:
    """parameter の型注釈テキストを返す。型が無ければ NO_EXPLICIT_TYPE。"""

    if parameter.type is None:
        return NO_EXPLICIT_TYPE
    text = remove_quotes(parameter.type.strip()) or ""
    text = _strip_code_delimiters(text).strip()
    if not text:
        return NO_EXPLICIT_TYPE
    return _PYTHON_TYPES.get(text, text)


__all__ = ["NO_EXPLICIT_TYPE", "NoExplicitType", "target_type"]
