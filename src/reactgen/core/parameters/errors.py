# どこで: `src/reactgen/core/parameters/errors.py`。
# 何を: パラメータ解決/出力で送出する例外を定義する。
# なぜ: 生成器がコンパイル単位ごとにまとめて報告できるよう、位置付きの構造化エラーにするため。

from __future__ import annotations

from reactgen.core.model.instances import SourceLocation


class ParameterCodegenError(Exception):
    """パラメータ解決/出力の失敗を表す基底例外。"""

    def __init__(self, message: str, *, location: SourceLocation | None = None) -> None:
        self.message = message
        self.location = location
        super().__init__(f"{location}: {message}" if location is not None else message)


class UnboundScopeError(ParameterCodegenError):
    """ParameterRef が必要とする祖先スコープが存在しない（ルートより上を参照した）。"""


class EmptyInitializerError(ParameterCodegenError):
    """1 項以上が必要な Value 列が空だった（入力の内部不整合）。"""


class AmbiguousNameError(ParameterCodegenError):
    """同じ宣言内に同名パラメータが複数ある。"""

    def __init__(
        self,
        reactor: str,
        names: tuple[str, ...],
        *,
        location: SourceLocation | None = None,
    ) -> None:
        self.reactor = reactor
        self.names = names
        super().__init__(
            f"reactor '{reactor}' に同名パラメータがある: {', '.join(names)}",
            location=location,
        )


__all__ = [
    "AmbiguousNameError",
    "EmptyInitializerError",
    "ParameterCodegenError",
    "UnboundScopeError",
]
