# src/buildline/core/config/merge.py
"""
Deep-merge da configuração do buildline.

Usado para sobrepor overrides (arquivo local ou dicionário passado a
`new_context`) sobre `DEFAULT_CONFIG`.

Política de merge (v1):
    - dict + dict → merge recursivo por chave
    - list        → sobrescrita total
    - escalar     → sobrescrita direta
    - None em qualquer lado → sobrescrita direta (sem verificação de tipo)
    - tipos divergentes → ConfigTypeConflictError

Invariantes:
    - Nenhum input é mutado
    - O mesmo par (base, override) produz sempre o mesmo resultado
"""

from copy import deepcopy
from typing import Any, Dict, List, Optional

from .errors import ConfigTypeConflictError


def deep_merge(base: Dict[str, Any], override: Dict[str, Any], _path: Optional[List[str]] = None) -> Dict[str, Any]:
    """
    Retorna um novo dicionário com `override` aplicado sobre `base`.

    Raises:
        ConfigTypeConflictError: conflito de tipo em alguma chave; a mensagem
            inclui o caminho completo da chave (ex.: `fork.max_workers`).
    """
    path = list(_path or [])

    if not isinstance(base, dict) or not isinstance(override, dict):
        raise ConfigTypeConflictError(
            f"Deep-merge requer dicts no nível raiz, recebido: "
            f"{type(base).__name__} vs {type(override).__name__}"
        )

    result: Dict[str, Any] = deepcopy(base)

    for key, value in override.items():
        key_path = ".".join(path + [str(key)])

        if key not in result or result[key] is None or value is None:
            result[key] = deepcopy(value)
            continue

        current = result[key]

        if isinstance(current, dict) and isinstance(value, dict):
            result[key] = deep_merge(current, value, path + [str(key)])
            continue

        if isinstance(value, list) and isinstance(current, list):
            result[key] = deepcopy(value)
            continue

        if type(current) is not type(value):
            raise ConfigTypeConflictError(
                f"Conflito de tipo na chave '{key_path}': "
                f"{type(current).__name__} vs {type(value).__name__}"
            )

        result[key] = deepcopy(value)

    return result
