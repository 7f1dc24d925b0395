# どこで: `src/reactgen/__init__.py`。
# 何を: ルート `reactgen` パッケージを定義する。
# なぜ: import 起点を `reactgen` に統一するため。

from __future__ import annotations

from reactgen.core.model import LoadedProgram, load_program, loads_program
from reactgen.core.parameters import (
    ParameterCodegenError,
    ProgramCode,
    emit_instance_override_map,
    emit_reactor_parameter_code,
    generate_program,
)

__all__ = [
    "LoadedProgram",
    "ParameterCodegenError",
    "ProgramCode",
    "emit_instance_override_map",
    "emit_reactor_parameter_code",
    "generate_program",
    "load_program",
    "loads_program",
]
