# どこで: `src/reactgen/core/model/invariants.py`。
# 何を: DeclarationTable / InstantiationTree の不変条件をテストで検証する関数を提供する。
# なぜ: 木と宣言の整合性の知識を 1 箇所へ固定し、ローダ変更時の踏み抜きを早期検知するため。

from __future__ import annotations

from .declarations import DeclarationTable, Parameter, ReactorDeclaration, all_parameters
from .instances import Instantiation, InstantiationTree


def assert_invariants(declarations: DeclarationTable, tree: InstantiationTree) -> None:
    """宣言テーブルとインスタンス木の不変条件を検査する。

    Notes
    -----
    テスト専用の検査関数。実行時に常時呼ぶことは想定しない。
    """

    for decl in declarations:
        assert isinstance(decl, ReactorDeclaration)
        assert declarations.get(decl.name) is decl
        for param in all_parameters(decl):
            assert isinstance(param, Parameter)
            # 既定 initializer は空にならない。
            assert len(param.init) >= 1

    roots = [node for node in tree if node.parent is None]
    assert len(roots) == (1 if len(tree) else 0)

    for i, node in enumerate(tree):
        assert isinstance(node, Instantiation)
        assert node.index == i
        assert tree.get(i) is node
        assert declarations.get(node.reactor.name) is node.reactor
        if node.parent is not None:
            # 親は子より先に追加されるので index は必ず小さい（循環しない）。
            assert node.parent.index < node.index
            assert tree.get(node.parent.index) is node.parent
            assert node in tree.children(node.parent)
        params = all_parameters(node.reactor)
        for assignment in node.assignments:
            assert any(assignment.lhs is p for p in params)
            assert len(assignment.rhs) >= 1

    if len(tree):
        assert len(list(tree.walk())) == len(tree)


__all__ = ["assert_invariants"]
