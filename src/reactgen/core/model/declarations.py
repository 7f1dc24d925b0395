# どこで: `src/reactgen/core/model/declarations.py`。
# 何を: Value / Parameter / ReactorDeclaration と、その読み取り専用テーブルを定義する。
# なぜ: パラメータ解決が参照する宣言側の情報を、ロード後に変化しない形で固定するため。

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType


class ValueKind(Enum):
    """initializer 項の種類。"""

    LITERAL = "literal"
    TIME = "time"
    PARAMETER = "parameter"


# 時間単位（小文字）から生成コードの単位マクロ名への対応表。
TIME_UNIT_MACROS: Mapping[str, str] = MappingProxyType(
    {
        "nsec": "NSEC",
        "nsecs": "NSEC",
        "ns": "NSEC",
        "usec": "USEC",
        "usecs": "USEC",
        "us": "USEC",
        "msec": "MSEC",
        "msecs": "MSEC",
        "ms": "MSEC",
        "sec": "SEC",
        "secs": "SEC",
        "second": "SEC",
        "seconds": "SEC",
        "s": "SEC",
        "min": "MINS",
        "mins": "MINS",
        "minute": "MINS",
        "minutes": "MINS",
        "hour": "HOURS",
        "hours": "HOURS",
        "day": "DAYS",
        "days": "DAYS",
        "week": "WEEKS",
        "weeks": "WEEKS",
    }
)


@dataclass(frozen=True, slots=True)
class Value:
    """initializer を構成する 1 項。

    Notes
    -----
    kind=PARAMETER の場合、値ではなく参照先 Parameter の同一性を保持する。
    生成には `of_literal` / `of_time` / `of_parameter` を使う。
    """

    kind: ValueKind
    literal: str | None = None
    magnitude: int | float | None = None
    unit: str | None = None
    parameter: Parameter | None = None

    @classmethod
    def of_literal(cls, text: str) -> Value:
        return cls(kind=ValueKind.LITERAL, literal=str(text))

    @classmethod
    def of_time(cls, magnitude: int | float, unit: str | None) -> Value:
        return cls(kind=ValueKind.TIME, magnitude=magnitude, unit=unit)

    @classmethod
    def of_parameter(cls, parameter: Parameter) -> Value:
        return cls(kind=ValueKind.PARAMETER, parameter=parameter)


# eq=False: 「同じパラメータ」は名前ではなく宣言スロットの同一性で判定する。
@dataclass(frozen=True, slots=True, eq=False)
class Parameter:
    """reactor 宣言上の型付きパラメータ。

    type が None のときは明示型なし。init は 1 項以上を前提とする
    （空の場合は解決時に EmptyInitializerError になる）。
    """

    name: str
    type: str | None
    init: tuple[Value, ...]

    def __repr__(self) -> str:
        return f"Parameter(name={self.name!r}, type={self.type!r})"


@dataclass(frozen=True, slots=True, eq=False)
class ReactorDeclaration:
    """再利用可能な reactor テンプレート。"""

    name: str
    parameters: tuple[Parameter, ...] = ()
    superclasses: tuple[ReactorDeclaration, ...] = ()

    def __repr__(self) -> str:
        return f"ReactorDeclaration(name={self.name!r})"


def all_parameters(decl: ReactorDeclaration) -> tuple[Parameter, ...]:
    """継承分を含む decl の全パラメータを返す。

    Notes
    -----
    基底クラスを宣言順・深さ優先で先に並べ、最後に decl 自身のパラメータを置く。
    菱形継承でも同じ宣言は 1 回しか辿らない。
    """

    out: list[Parameter] = []
    visited: set[int] = set()

    def visit(d: ReactorDeclaration) -> None:
        if id(d) in visited:
            return
        visited.add(id(d))
        for base in d.superclasses:
            visit(base)
        out.extend(d.parameters)

    visit(decl)
    return tuple(out)


def duplicate_parameter_names(decl: ReactorDeclaration) -> tuple[str, ...]:
    """all_parameters(decl) 内で 2 回以上現れる名前を初出順に返す。"""

    seen: set[str] = set()
    dups: list[str] = []
    for param in all_parameters(decl):
        if param.name in seen and param.name not in dups:
            dups.append(param.name)
        seen.add(param.name)
    return tuple(dups)


class DeclarationTable:
    """reactor 宣言の読み取り専用ビュー（名前 -> 宣言）。"""

    def __init__(self, declarations: Iterable[ReactorDeclaration] = ()) -> None:
        self._items: dict[str, ReactorDeclaration] = {}
        for decl in declarations:
            if decl.name in self._items:
                raise ValueError(f"reactor '{decl.name}' は既に宣言されている")
            self._items[decl.name] = decl

    def get(self, name: str) -> ReactorDeclaration:
        """名前に対応する宣言を返す。

        Raises
        ------
        KeyError
            未宣言の名前が指定された場合。
        """
        return self._items[name]

    def __getitem__(self, name: str) -> ReactorDeclaration:
        return self.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._items

    def __iter__(self) -> Iterator[ReactorDeclaration]:
        return iter(self._items.values())

    def __len__(self) -> int:
        return len(self._items)

    def names(self) -> tuple[str, ...]:
        return tuple(self._items)


__all__ = [
    "DeclarationTable",
    "Parameter",
    "ReactorDeclaration",
    "TIME_UNIT_MACROS",
    "Value",
    "ValueKind",
    "all_parameters",
    "duplicate_parameter_names",
]
