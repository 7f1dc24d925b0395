# どこで: `src/reactgen/core/codegen_config.py`。
# 何を: config.yaml によるコード生成設定（探索・ロード・キャッシュ）を提供する。
# なぜ: 生成コードの命名規約や override 注入方式を、コードを触らずに切り替えられるようにするため。

from __future__ import annotations

from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from typing import Any

import yaml

OVERRIDE_INJECTIONS = ("targeted", "bulk")
DUPLICATE_NAME_POLICIES = ("warn", "error", "allow")


@dataclass(frozen=True, slots=True)
class CodegenConfig:
    """reactgen のコード生成設定。"""

    config_path: Path | None
    field_prefix: str
    reference_suffix: str
    sequence_separator: str
    override_injection: str  # "targeted" | "bulk"
    duplicate_names: str  # "warn" | "error" | "allow"
    accessor_lint_comment: bool


_EXPLICIT_CONFIG_PATH: Path | None = None
_CONFIG_CACHE: CodegenConfig | None = None


def set_config_path(path: str | Path | None) -> None:
    """以降の設定探索で使う明示 config パスを設定する。

    Notes
    -----
    `path` を None にすると明示指定を解除し、既定の探索に戻る。
    """

    global _EXPLICIT_CONFIG_PATH, _CONFIG_CACHE
    if path is None:
        _EXPLICIT_CONFIG_PATH = None
        _CONFIG_CACHE = None
        return
    _EXPLICIT_CONFIG_PATH = Path(str(path)).expanduser()
    _CONFIG_CACHE = None


def _default_config_candidates() -> tuple[Path, ...]:
    cwd = Path.cwd()
    home = Path.home()
    return (
        cwd / ".reactgen" / "config.yaml",
        home / ".config" / "reactgen" / "config.yaml",
    )


def _as_mapping(value: Any, *, key: str) -> dict[str, Any]:
    if value is None:
        return {}
    if isinstance(value, dict):
        return dict(value)
    raise RuntimeError(f"{key} は mapping である必要があります: got={value!r}")


def _as_str(value: Any, *, key: str) -> str:
    if value is None:
        raise RuntimeError(f"{key} が未設定です（同梱 default_config.yaml を確認してください）")
    if not isinstance(value, str):
        raise RuntimeError(f"{key} は文字列である必要があります: got={value!r}")
    return value


def _as_choice(value: Any, *, key: str, choices: tuple[str, ...]) -> str:
    text = _as_str(value, key=key).strip()
    if text not in choices:
        raise ValueError(f"{key} は {list(choices)} のいずれかである必要があります: got={text!r}")
    return text


def _as_bool(value: Any, *, key: str) -> bool:
    if not isinstance(value, bool):
        raise RuntimeError(f"{key} は真偽値である必要があります: got={value!r}")
    return value


def _load_yaml_text(text: str, *, source: str) -> dict[str, Any]:
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise RuntimeError(f"config.yaml の読み込みに失敗しました: source={source}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise RuntimeError(f"config.yaml は mapping である必要があります: source={source}")

    return dict(data)


def _load_yaml_config(path: Path) -> dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    return _load_yaml_text(text, source=str(path))


def _load_packaged_default_config() -> dict[str, Any]:
    """同梱デフォルト config をロードして dict を返す。"""

    try:
        blob = (
            resources.files("reactgen")
            .joinpath("resource", "default_config.yaml")
            .read_text(encoding="utf-8")
        )
    except OSError as exc:  # pragma: no cover
        raise RuntimeError(
            "同梱 default_config.yaml の読み込みに失敗しました"
            "（パッケージ配布物の package-data を確認してください）"
        ) from exc

    return _load_yaml_text(blob, source="reactgen/resource/default_config.yaml")


def _merge_payload(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """`codegen` セクションだけはキー単位で後勝ちマージする。"""

    merged = dict(base)
    for key, value in override.items():
        if key == "codegen" and isinstance(value, dict) and isinstance(merged.get(key), dict):
            section = dict(merged[key])
            section.update(value)
            merged[key] = section
        else:
            merged[key] = value
    return merged


def codegen_config() -> CodegenConfig:
    """コード生成設定をロードして返す（キャッシュ）。

    上書き順（後勝ち）:
    1) 同梱 default_config.yaml
    2) `./.reactgen/config.yaml` / `~/.config/reactgen/config.yaml`
    3) `set_config_path()` で指定したパス
    """

    global _CONFIG_CACHE
    if _CONFIG_CACHE is not None:
        return _CONFIG_CACHE

    explicit_path = _EXPLICIT_CONFIG_PATH
    if explicit_path is not None and not explicit_path.is_file():
        raise FileNotFoundError(f"config.yaml が見つかりません: {explicit_path}")

    discovered_path: Path | None = None
    for p in _default_config_candidates():
        if p.is_file():
            discovered_path = p
            break

    payload = _load_packaged_default_config()
    if discovered_path is not None:
        payload = _merge_payload(payload, _load_yaml_config(discovered_path))
    if explicit_path is not None:
        payload = _merge_payload(payload, _load_yaml_config(explicit_path))

    version = payload.get("version")
    if version is None:
        raise RuntimeError(
            "config.yaml の version が未設定です（同梱 default_config.yaml を確認してください）"
        )
    try:
        version_i = int(version)
    except (TypeError, ValueError) as exc:
        raise RuntimeError(f"config.yaml の version は整数である必要があります: got={version!r}") from exc
    if version_i != 1:
        raise RuntimeError(f"未対応の config.yaml version です: got={version_i}")

    codegen = _as_mapping(payload.get("codegen"), key="codegen")
    separator = _as_str(codegen.get("sequence_separator"), key="codegen.sequence_separator")
    if not separator:
        raise ValueError("codegen.sequence_separator は空にできません")

    cfg = CodegenConfig(
        config_path=explicit_path or discovered_path,
        field_prefix=_as_str(codegen.get("field_prefix"), key="codegen.field_prefix"),
        reference_suffix=_as_str(codegen.get("reference_suffix"), key="codegen.reference_suffix"),
        sequence_separator=separator,
        override_injection=_as_choice(
            codegen.get("override_injection"),
            key="codegen.override_injection",
            choices=OVERRIDE_INJECTIONS,
        ),
        duplicate_names=_as_choice(
            codegen.get("duplicate_names"),
            key="codegen.duplicate_names",
            choices=DUPLICATE_NAME_POLICIES,
        ),
        accessor_lint_comment=_as_bool(
            codegen.get("accessor_lint_comment"), key="codegen.accessor_lint_comment"
        ),
    )
    _CONFIG_CACHE = cfg
    return cfg


__all__ = [
    "CodegenConfig",
    "DUPLICATE_NAME_POLICIES",
    "OVERRIDE_INJECTIONS",
    "codegen_config",
    "set_config_path",
]
