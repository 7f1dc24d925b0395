# どこで: `src/reactgen/core/parameters/program.py`。
# 何を: 全 reactor 宣言と全インスタンスに対してパラメータコードを生成し、エラーをまとめて返す。
# なぜ: 1 件目のエラーで止めず、コンパイル単位内の問題を一括で報告できるようにするため。

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass

from reactgen.core.codegen_config import CodegenConfig, codegen_config
from reactgen.core.model.declarations import DeclarationTable
from reactgen.core.model.instances import InstantiationTree

from .emitter import (
    InstanceOverrides,
    ReactorParameterCode,
    emit_instance_override_map,
    emit_reactor_parameter_code,
)
from .errors import ParameterCodegenError

_logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ProgramCode:
    """プログラム全体のパラメータコード生成結果。

    reactors は reactor 名、overrides はインスタンスの full_name をキーにする。
    失敗した単位はどちらにも含まれず、errors に発生順で残る。
    """

    reactors: Mapping[str, ReactorParameterCode]
    overrides: Mapping[str, InstanceOverrides]
    errors: tuple[ParameterCodegenError, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.errors

    def raise_for_errors(self) -> None:
        """errors があれば ExceptionGroup としてまとめて送出する。"""
        if self.errors:
            raise ExceptionGroup(
                f"パラメータコード生成に失敗した単位が {len(self.errors)} 件ある",
                list(self.errors),
            )


def generate_program(
    declarations: DeclarationTable,
    tree: InstantiationTree,
    *,
    config: CodegenConfig | None = None,
) -> ProgramCode:
    """宣言ごとの骨格/accessor と、インスタンスごとの上書き mapping を生成する。"""

    cfg = codegen_config() if config is None else config
    reactors: dict[str, ReactorParameterCode] = {}
    overrides: dict[str, InstanceOverrides] = {}
    errors: list[ParameterCodegenError] = []

    for decl in declarations:
        try:
            reactors[decl.name] = emit_reactor_parameter_code(decl, config=cfg)
        except ParameterCodegenError as exc:
            errors.append(exc)

    for node in tree.walk():
        try:
            overrides[node.full_name] = emit_instance_override_map(node, config=cfg)
        except ParameterCodegenError as exc:
            errors.append(exc)

    if errors:
        _logger.warning(
            "パラメータコード生成でエラーを検出しました: count=%d first=%s",
            len(errors),
            errors[0],
        )
    return ProgramCode(reactors=reactors, overrides=overrides, errors=tuple(errors))


__all__ = ["ProgramCode", "generate_program"]
