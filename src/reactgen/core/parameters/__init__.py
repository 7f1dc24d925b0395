# どこで: `src/reactgen/core/parameters/__init__.py`。
# 何を: パラメータ解決/出力エンジンの公開エイリアスをまとめる。
# なぜ: 周辺の生成器から最小インポートで使えるようにするため。

from .errors import (
    AmbiguousNameError,
    EmptyInitializerError,
    ParameterCodegenError,
    UnboundScopeError,
)
from .types import NO_EXPLICIT_TYPE, NoExplicitType, target_type
from .serializer import path_to, serialize_value
from .resolver import OVERRIDE_SCOPE_DEPTH, ResolvedTerm, last_assignment, resolve_parameter
from .emitter import (
    InstanceOverrides,
    ReactorParameterCode,
    emit_instance_override_map,
    emit_reactor_parameter_code,
    render_accessors,
    render_construction_kwargs,
    render_default_skeleton,
    render_initializer,
    render_resolved_initializer,
)
from .program import ProgramCode, generate_program

__all__ = [
    "AmbiguousNameError",
    "EmptyInitializerError",
    "ParameterCodegenError",
    "UnboundScopeError",
    "NO_EXPLICIT_TYPE",
    "NoExplicitType",
    "target_type",
    "path_to",
    "serialize_value",
    "OVERRIDE_SCOPE_DEPTH",
    "ResolvedTerm",
    "last_assignment",
    "resolve_parameter",
    "InstanceOverrides",
    "ReactorParameterCode",
    "emit_instance_override_map",
    "emit_reactor_parameter_code",
    "render_accessors",
    "render_construction_kwargs",
    "render_default_skeleton",
    "render_initializer",
    "render_resolved_initializer",
    "ProgramCode",
    "generate_program",
]
