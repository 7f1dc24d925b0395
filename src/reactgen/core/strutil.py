# どこで: `src/reactgen/core/strutil.py`。
# 何を: 引用符の除去と camelCase -> snake_case 変換を提供する。
# なぜ: 型テキストや reactor 名の正規化を生成器の各所で同じ規則に揃えるため。

from __future__ import annotations

import re

_ACRONYM_BOUNDARY = re.compile(r"([A-Z]+)([A-Z][a-z])")
_WORD_BOUNDARY = re.compile(r"([a-z\d])([A-Z])")


def remove_quotes(text: str | None) -> str | None:
    """両端が同じ引用符（`"` か `'`）なら 1 組だけ外して返す。"""

    if text is None:
        return None
    if len(text) < 2:
        return text
    if text[0] == text[-1] and text[0] in ("'", '"'):
        return text[1:-1]
    return text


def camel_to_snake(text: str) -> str:
    """camelCase / PascalCase を snake_case に変換して返す。

    連続した大文字は 1 語として扱う（``ASTBuilder`` -> ``ast_builder``）。
    """

    s = _ACRONYM_BOUNDARY.sub(r"\1_\2", text)
    s = _WORD_BOUNDARY.sub(r"\1_\2", s)
    return s.lower()


__all__ = ["camel_to_snake", "remove_quotes"]
