# どこで: `src/reactgen/core/parameters/emitter.py`。
# 何を: 既定値の backing field 骨格、accessor、インスタンスごとの上書き initializer を出力する。
# なぜ: 宣言単位で 1 回だけ書く既定値と、インスタンス単位で算出する上書き値を分けて扱うため。

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from types import MappingProxyType

from reactgen.core.codegen_config import CodegenConfig, codegen_config
from reactgen.core.model.declarations import (
    Parameter,
    ReactorDeclaration,
    all_parameters,
    duplicate_parameter_names,
)
from reactgen.core.model.instances import Instantiation, ParameterInstance
from reactgen.core.strutil import camel_to_snake

from .errors import AmbiguousNameError, EmptyInitializerError
from .resolver import resolve_parameter
from .serializer import serialize_value
from .types import NO_EXPLICIT_TYPE, target_type

_logger = logging.getLogger(__name__)

InstanceOverrides = Mapping[str, str]


@dataclass(frozen=True, slots=True)
class ReactorParameterCode:
    """1 reactor 宣言ぶんのパラメータ関連コード。"""

    reactor: str
    module_name: str
    skeleton: str
    accessors: str


def render_initializer(texts: Sequence[str], *, config: CodegenConfig | None = None) -> str:
    """項列を 1 つの initializer 式にする（1 項なら裸、複数ならタプル）。"""

    if not texts:
        raise EmptyInitializerError("initializer の項列が空である")
    if len(texts) == 1:
        return texts[0]
    cfg = codegen_config() if config is None else config
    return "(" + cfg.sequence_separator.join(texts) + ")"


def _distinct_names(params: Sequence[Parameter]) -> list[str]:
    names: list[str] = []
    for p in params:
        if p.name not in names:
            names.append(p.name)
    return names


def _default_field_line(param: Parameter, decl: ReactorDeclaration, cfg: CodegenConfig) -> str:
    if not param.init:
        raise EmptyInitializerError(f"'{decl.name}.{param.name}' の既定 initializer が空である")
    # クラス本体は宣言スコープなので scope=None で書き出す。
    texts = [serialize_value(v, None, config=cfg) for v in param.init]
    initializer = render_initializer(texts, config=cfg)
    field = f"self.{cfg.field_prefix}{param.name}"
    type_text = target_type(param)
    if type_text is NO_EXPLICIT_TYPE:
        return f"{field} = {initializer}"
    return f"{field}:{type_text} = {initializer}"


def _override_injection_lines(names: Sequence[str], cfg: CodegenConfig) -> list[str]:
    if cfg.override_injection == "bulk":
        return ["self.__dict__.update(kwargs)"]
    lines: list[str] = []
    for name in names:
        field = f"{cfg.field_prefix}{name}"
        lines.append(f'self.{field} = kwargs.get("{field}", self.{field})')
    return lines


def render_default_skeleton(
    decl: ReactorDeclaration, *, config: CodegenConfig | None = None
) -> str:
    """decl の既定値 backing field と、構築時の上書き注入文を出力する。

    Notes
    -----
    既定値は宣言順に 1 行ずつ出す。上書き値はここには焼き込まず、
    構築時に呼び出し側が渡す kwargs（`emit_instance_override_map` の結果）から注入する。
    """

    cfg = codegen_config() if config is None else config
    params = all_parameters(decl)
    lines = ["# Define parameters and their default values"]
    for param in params:
        lines.append(_default_field_line(param, decl, cfg))
    lines.append("# Handle parameters that are set in instantiation")
    lines.extend(_override_injection_lines(_distinct_names(params), cfg))
    lines.append("")
    return "\n".join(lines)


def _check_duplicate_names(decl: ReactorDeclaration, cfg: CodegenConfig) -> None:
    dups = duplicate_parameter_names(decl)
    if not dups:
        return
    if cfg.duplicate_names == "error":
        raise AmbiguousNameError(decl.name, dups)
    if cfg.duplicate_names == "warn":
        _logger.warning(
            "同名パラメータの accessor を 1 つにまとめます: reactor=%s names=%s",
            decl.name,
            ", ".join(dups),
        )


def _render_accessor(name: str, cfg: CodegenConfig) -> str:
    suffix = " # pylint: disable=no-member" if cfg.accessor_lint_comment else ""
    return "\n".join(
        [
            "@property",
            f"def {name}(self):",
            f"    return self.{cfg.field_prefix}{name}{suffix}",
            "",
        ]
    )


def render_accessors(decl: ReactorDeclaration, *, config: CodegenConfig | None = None) -> str:
    """decl のパラメータ名ごとに読み取り専用 accessor を 1 つ出力する。

    名前だけで重複を除き、初出順に並べる。重複の扱いは `duplicate_names` 設定に従う。
    """

    cfg = codegen_config() if config is None else config
    _check_duplicate_names(decl, cfg)
    names = _distinct_names(all_parameters(decl))
    return "\n".join(_render_accessor(name, cfg) for name in names)


def render_resolved_initializer(
    pi: ParameterInstance, *, config: CodegenConfig | None = None
) -> str:
    """pi を解決し、項数規則に従った initializer 式を返す。"""

    cfg = codegen_config() if config is None else config
    terms = resolve_parameter(pi, config=cfg)
    return render_initializer([t.text for t in terms], config=cfg)


def emit_reactor_parameter_code(
    decl: ReactorDeclaration, *, config: CodegenConfig | None = None
) -> ReactorParameterCode:
    cfg = codegen_config() if config is None else config
    return ReactorParameterCode(
        reactor=decl.name,
        module_name=camel_to_snake(decl.name),
        skeleton=render_default_skeleton(decl, config=cfg),
        accessors=render_accessors(decl, config=cfg),
    )


def emit_instance_override_map(
    node: Instantiation, *, config: CodegenConfig | None = None
) -> InstanceOverrides:
    """node の全パラメータについて、名前 -> 解決済み initializer の読み取り専用 mapping を返す。

    同名パラメータは骨格の代入順と揃えて後勝ちにする。
    """

    cfg = codegen_config() if config is None else config
    out: dict[str, str] = {}
    for param in all_parameters(node.reactor):
        pi = ParameterInstance(parameter=param, host=node)
        out[param.name] = render_resolved_initializer(pi, config=cfg)
    return MappingProxyType(out)


def render_construction_kwargs(
    overrides: InstanceOverrides, *, config: CodegenConfig | None = None
) -> str:
    """構築呼び出しに渡すキーワード引数列（`_p=5, _q=(1, 2)`）を返す。"""

    cfg = codegen_config() if config is None else config
    return ", ".join(f"{cfg.field_prefix}{name}={text}" for name, text in overrides.items())


__all__ = [
    "InstanceOverrides",
    "ReactorParameterCode",
    "emit_instance_override_map",
    "emit_reactor_parameter_code",
    "render_accessors",
    "render_construction_kwargs",
    "render_default_skeleton",
    "render_initializer",
    "render_resolved_initializer",
]
