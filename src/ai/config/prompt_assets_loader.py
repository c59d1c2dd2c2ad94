"""Loader dos assets YAML de prompt e respostas prontas.

System prompt, template do usuário e respostas canônicas ficam em
``src/ai/prompts/yaml/``; nenhum texto de prompt vive em ``.py``.
Os arquivos são lidos uma vez e mantidos em cache.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path, PurePosixPath
from typing import Any

import yaml

_PROMPTS_YAML_DIR = Path(__file__).resolve().parents[1] / "prompts" / "yaml"


class PromptAssetError(RuntimeError):
    """Asset de prompt ausente ou malformado."""


def _resolve_relative_path(base_dir: Path, relative_path: str) -> Path:
    if not relative_path:
        raise PromptAssetError("relative_path vazio")
    normalized = PurePosixPath(relative_path.replace("\\", "/"))
    if normalized.is_absolute() or Path(relative_path).is_absolute():
        raise PromptAssetError(f"relative_path deve ser relativo: {relative_path}")
    if ".." in normalized.parts:
        raise PromptAssetError(f"'..' não permitido em {relative_path}")
    return base_dir.joinpath(*normalized.parts).resolve()


@lru_cache(maxsize=32)
def load_prompt_yaml(relative_path: str) -> dict[str, Any]:
    """Conteúdo de um YAML de ``src/ai/prompts/yaml/`` como dict."""
    path = _resolve_relative_path(_PROMPTS_YAML_DIR, relative_path)
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise PromptAssetError(f"YAML de prompt nao encontrado: {relative_path}") from exc

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as exc:  # pragma: no cover
        raise PromptAssetError(f"YAML malformado em {relative_path}: {exc}") from exc

    if not isinstance(data, dict):
        raise PromptAssetError(f"{relative_path}: raiz do YAML deve ser dict")
    return data


def _required_text(relative_path: str, field: str) -> str:
    value = load_prompt_yaml(relative_path).get(field)
    if isinstance(value, str) and value.strip():
        return value
    raise PromptAssetError(f"{relative_path}: campo `{field}` vazio ou ausente")


def load_prompt_template(relative_path: str) -> str:
    return _required_text(relative_path, "template")


def load_system_prompt(relative_path: str) -> str:
    return _required_text(relative_path, "system_prompt")


def load_text_table(relative_path: str, field: str) -> dict[str, str]:
    """Tabela ``chave -> texto`` (ex: respostas prontas por função)."""
    table = load_prompt_yaml(relative_path).get(field)
    if not isinstance(table, dict):
        raise PromptAssetError(f"{relative_path}: campo `{field}` deve ser dict")
    return {str(key): str(value).strip() for key, value in table.items()}


def clear_prompt_assets_cache() -> None:
    load_prompt_yaml.cache_clear()
