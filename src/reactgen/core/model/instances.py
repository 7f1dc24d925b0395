# どこで: `src/reactgen/core/model/instances.py`。
# 何を: Assignment / Instantiation / InstantiationTree / ParameterInstance を定義する。
# なぜ: プログラム全体の reactor インスタンス木を、安定 index で引ける不変な形で保持するため。

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from .declarations import Parameter, ReactorDeclaration, Value, all_parameters


@dataclass(frozen=True, slots=True)
class SourceLocation:
    """ソース上の位置（エラー報告用）。"""

    file: str
    line: int

    def __str__(self) -> str:
        return f"{self.file}:{self.line}"


@dataclass(frozen=True, slots=True)
class Assignment:
    """インスタンス化地点で与えられるパラメータ上書き。"""

    lhs: Parameter
    rhs: tuple[Value, ...]
    location: SourceLocation | None = None


@dataclass(frozen=True, slots=True, eq=False)
class Instantiation:
    """reactor 宣言の具体的な配置。

    Notes
    -----
    parent は所有しない後方参照。親から子への参照は持たず、子の列挙は
    InstantiationTree の index 表で行うため循環参照にならない。
    """

    index: int
    name: str
    reactor: ReactorDeclaration
    parent: Instantiation | None
    assignments: tuple[Assignment, ...] = ()

    @property
    def full_name(self) -> str:
        """ルートからの名前をドットで連結して返す。"""
        parts: list[str] = []
        node: Instantiation | None = self
        while node is not None:
            parts.append(node.name)
            node = node.parent
        return ".".join(reversed(parts))

    def __repr__(self) -> str:
        return f"Instantiation(index={self.index}, full_name={self.full_name!r})"


@dataclass(frozen=True, slots=True)
class ParameterInstance:
    """Parameter と、それをホストする Instantiation の組（解決の単位）。"""

    parameter: Parameter
    host: Instantiation


def ancestor(node: Instantiation, depth: int) -> Instantiation | None:
    """node から depth 段上の祖先を返す。ルートを越える場合は None。"""

    if depth < 0:
        raise ValueError(f"depth は 0 以上である必要がある: got={depth}")
    current: Instantiation | None = node
    for _ in range(depth):
        if current is None:
            return None
        current = current.parent
    return current


class InstantiationTree:
    """Instantiation を安定 index で保持するアリーナ。"""

    def __init__(self) -> None:
        self._nodes: list[Instantiation] = []
        self._children: dict[int, list[int]] = {}

    def add(
        self,
        name: str,
        reactor: ReactorDeclaration,
        *,
        parent: Instantiation | None = None,
        assignments: Iterable[Assignment] = (),
    ) -> Instantiation:
        """ノードを追加して返す。

        Raises
        ------
        ValueError
            ルートの重複、他の木に属する parent、兄弟名の重複、
            または reactor に存在しないパラメータへの Assignment がある場合。
        """
        assignments_t = tuple(assignments)
        if parent is None:
            if self._nodes:
                raise ValueError(f"ルートは既に存在する: {self._nodes[0].name!r}")
        else:
            if not self._owns(parent):
                raise ValueError(f"parent がこの木に属していない: {parent!r}")
            for sibling in self.children(parent):
                if sibling.name == name:
                    raise ValueError(f"兄弟名が重複している: {parent.full_name}.{name}")

        params = all_parameters(reactor)
        for assignment in assignments_t:
            if not any(assignment.lhs is p for p in params):
                raise ValueError(
                    f"reactor '{reactor.name}' にパラメータ '{assignment.lhs.name}' は存在しない"
                )

        node = Instantiation(
            index=len(self._nodes),
            name=str(name),
            reactor=reactor,
            parent=parent,
            assignments=assignments_t,
        )
        self._nodes.append(node)
        self._children[node.index] = []
        if parent is not None:
            self._children[parent.index].append(node.index)
        return node

    def _owns(self, node: Instantiation) -> bool:
        return 0 <= node.index < len(self._nodes) and self._nodes[node.index] is node

    @property
    def root(self) -> Instantiation:
        if not self._nodes:
            raise LookupError("InstantiationTree が空である")
        return self._nodes[0]

    def get(self, index: int) -> Instantiation:
        return self._nodes[index]

    def children(self, node: Instantiation) -> tuple[Instantiation, ...]:
        return tuple(self._nodes[i] for i in self._children.get(node.index, ()))

    def walk(self, node: Instantiation | None = None) -> Iterator[Instantiation]:
        """node（省略時はルート）以下を先行順（上から下）に列挙する。"""
        if not self._nodes:
            return
        stack = [self.root if node is None else node]
        while stack:
            current = stack.pop()
            yield current
            stack.extend(reversed(self.children(current)))

    def parameter_instances(self, node: Instantiation) -> tuple[ParameterInstance, ...]:
        return tuple(ParameterInstance(parameter=p, host=node) for p in all_parameters(node.reactor))

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[Instantiation]:
        return iter(self._nodes)


__all__ = [
    "Assignment",
    "Instantiation",
    "InstantiationTree",
    "ParameterInstance",
    "SourceLocation",
    "ancestor",
]
