# どこで: `src/reactgen/core/parameters/resolver.py`。
# 何を: ParameterInstance ごとに、上書き/既定のどちらを採用するか決めて initializer 項列を返す。
# なぜ: 同じ宣言を共有する多数のインスタンスで、インスタンス固有の値を一意に決めるため。

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Final

from reactgen.core.codegen_config import CodegenConfig, codegen_config
from reactgen.core.model.declarations import ValueKind
from reactgen.core.model.instances import Assignment, ParameterInstance, ancestor

from .errors import EmptyInitializerError, UnboundScopeError
from .serializer import path_to, serialize_value

_logger = logging.getLogger(__name__)

# 上書き右辺の ParameterRef は host の 2 段上で解決する。
OVERRIDE_SCOPE_DEPTH: Final = 2


@dataclass(frozen=True, slots=True)
class ResolvedTerm:
    """解決済みの initializer 1 項。

    is_reference=True のとき text はインスタンス経由のアクセス式。
    上書き由来なら host の祖先、既定値由来なら host 自身を経由する。
    """

    text: str
    is_reference: bool = False


def last_assignment(pi: ParameterInstance) -> Assignment | None:
    """host の Assignment 列を先頭から走査し、pi.parameter への最後の代入を返す。

    Notes
    -----
    比較は宣言スロットの同一性で行い、名前は見ない（後勝ち）。
    """

    found: Assignment | None = None
    for assignment in pi.host.assignments:
        if assignment.lhs is pi.parameter:
            found = assignment
    return found


def _resolve_override(
    pi: ParameterInstance, assignment: Assignment, cfg: CodegenConfig
) -> tuple[ResolvedTerm, ...]:
    host = pi.host
    if not assignment.rhs:
        raise EmptyInitializerError(
            f"'{host.full_name}.{pi.parameter.name}' への代入の右辺が空である",
            location=assignment.location,
        )

    terms: list[ResolvedTerm] = []
    for value in assignment.rhs:
        if value.kind is ValueKind.PARAMETER and value.parameter is not None:
            # 右辺はインスタンス化を行う側の字句スコープで書かれているので、
            # 参照は host から OVERRIDE_SCOPE_DEPTH 段上のインスタンス経由で出力する。
            scope = ancestor(host, OVERRIDE_SCOPE_DEPTH)
            if scope is None:
                raise UnboundScopeError(
                    f"'{host.full_name}.{pi.parameter.name}' の右辺が参照する "
                    f"'{value.parameter.name}' のスコープがルートより上にある",
                    location=assignment.location,
                )
            text = f"{path_to(scope, config=cfg)}.{value.parameter.name}"
            terms.append(ResolvedTerm(text=text, is_reference=True))
        else:
            terms.append(ResolvedTerm(text=serialize_value(value, host, config=cfg)))
    return tuple(terms)


def _resolve_default(pi: ParameterInstance, cfg: CodegenConfig) -> tuple[ResolvedTerm, ...]:
    host = pi.host
    if not pi.parameter.init:
        raise EmptyInitializerError(
            f"'{host.reactor.name}.{pi.parameter.name}' の既定 initializer が空である"
        )
    # 既定値は宣言 reactor 自身のスコープで完結するので、スコープはずらさない。
    return tuple(
        ResolvedTerm(
            text=serialize_value(value, host, config=cfg),
            is_reference=value.kind is ValueKind.PARAMETER,
        )
        for value in pi.parameter.init
    )


def resolve_parameter(
    pi: ParameterInstance, *, config: CodegenConfig | None = None
) -> tuple[ResolvedTerm, ...]:
    """pi の initializer を解決して項列を返す。

    Notes
    -----
    項数は採用した側（上書きか既定か）のものをそのまま保つ。両者を混ぜない。

    Raises
    ------
    UnboundScopeError
        上書き右辺の ParameterRef が必要とする祖先が存在しない場合。
    EmptyInitializerError
        採用した側の Value 列が空の場合。
    """

    cfg = codegen_config() if config is None else config
    assignment = last_assignment(pi)
    if assignment is not None:
        terms = _resolve_override(pi, assignment, cfg)
        source = "override"
    else:
        terms = _resolve_default(pi, cfg)
        source = "default"
    _logger.debug(
        "resolved %s.%s from %s: %s",
        pi.host.full_name,
        pi.parameter.name,
        source,
        [t.text for t in terms],
    )
    return terms


__all__ = ["OVERRIDE_SCOPE_DEPTH", "ResolvedTerm", "last_assignment", "resolve_parameter"]
