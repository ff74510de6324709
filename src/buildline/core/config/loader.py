# src/buildline/core/config/loader.py
"""
Loader de configuração do buildline.

A configuração efetiva é resolvida a partir de:
    - DEFAULT_CONFIG embutido no pacote
    - um arquivo de defaults do projeto (obrigatório)
    - um arquivo local de overrides (opcional; ignorado se não existir)

Formatos suportados: YAML (via PyYAML, `yaml.safe_load`) e JSON.

Limites explícitos:
    - A configuração descreve políticas do engine/fork e defaults de
      parâmetros de transforms; ela não descreve o build em si
    - Não valida semântica de parâmetros (o registry faz isso no `apply`)
"""

import json
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml  # PyYAML

from .defaults import DEFAULT_CONFIG
from .errors import (
    DefaultsNotFoundError,
    InvalidConfigRootTypeError,
    UnsupportedConfigFormatError,
)
from .merge import deep_merge


PathLike = Union[str, Path]


def _load_file(path: Path) -> Dict[str, Any]:
    """
    Lê um arquivo de configuração e garante que a raiz seja um dict.

    Arquivos vazios são interpretados como `{}`.

    Raises:
        DefaultsNotFoundError: arquivo inexistente.
        UnsupportedConfigFormatError: extensão fora de .yaml/.yml/.json.
        InvalidConfigRootTypeError: raiz diferente de dict.
    """
    if not path.exists():
        raise DefaultsNotFoundError(f"Arquivo de configuração não encontrado: {path}")

    suffix = path.suffix.lower()

    if suffix in {".yaml", ".yml"}:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    elif suffix == ".json":
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    else:
        raise UnsupportedConfigFormatError(f"Formato não suportado: {path.suffix}")

    if data is None:
        data = {}

    if not isinstance(data, dict):
        raise InvalidConfigRootTypeError(
            f"Config root deve ser dict, recebido: {type(data).__name__}"
        )

    return data


def load_config(
    *,
    defaults_path: PathLike,
    local_path: Optional[PathLike] = None,
) -> Dict[str, Any]:
    """
    Carrega e resolve a configuração efetiva de um build.

    Precedência (menor → maior): DEFAULT_CONFIG, defaults_path, local_path.

    Returns:
        Dict[str, Any]: configuração resolvida, pronta para `new_context(config=...)`.

    Raises:
        DefaultsNotFoundError, UnsupportedConfigFormatError,
        InvalidConfigRootTypeError, ConfigTypeConflictError
    """
    effective = deep_merge(DEFAULT_CONFIG, _load_file(Path(defaults_path)))

    if local_path is not None:
        local_file = Path(local_path)
        if local_file.exists():
            effective = deep_merge(effective, _load_file(local_file))

    return effective
