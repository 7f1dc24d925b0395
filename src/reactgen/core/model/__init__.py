# どこで: `src/reactgen/core/model/__init__.py`。
# 何を: 宣言テーブルとインスタンス木の公開エイリアスをまとめる。
# なぜ: 生成器側から最小インポートで使えるようにするため。

from .declarations import (
    DeclarationTable,
    Parameter,
    ReactorDeclaration,
    TIME_UNIT_MACROS,
    Value,
    ValueKind,
    all_parameters,
    duplicate_parameter_names,
)
from .instances import (
    Assignment,
    Instantiation,
    InstantiationTree,
    ParameterInstance,
    SourceLocation,
    ancestor,
)
from .codec import LoadedProgram, decode_program, load_program, loads_program

__all__ = [
    "DeclarationTable",
    "Parameter",
    "ReactorDeclaration",
    "TIME_UNIT_MACROS",
    "Value",
    "ValueKind",
    "all_parameters",
    "duplicate_parameter_names",
    "Assignment",
    "Instantiation",
    "InstantiationTree",
    "ParameterInstance",
    "SourceLocation",
    "ancestor",
    "LoadedProgram",
    "decode_program",
    "load_program",
    "loads_program",
]
