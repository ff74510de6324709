# src/buildline/core/config/hashing.py
"""
Hash canônico da configuração efetiva de um build.

O hash identifica estruturalmente a configuração usada por um
BuildContext e é registrado em `ctx.meta["config_hash"]`, permitindo
comparar dois builds sem inspecionar a configuração inteira.

Política (v1):
    - JSON canônico (chaves ordenadas, separadores compactos, UTF-8)
    - SHA-256 em hexadecimal
    - valores não serializáveis são representados por `str(value)`

Limites explícitos:
    - Não carrega nem resolve configuração
    - Não persiste o hash
"""

import hashlib
import json
from typing import Any, Dict


def canonical_config_json(config: Dict[str, Any]) -> str:
    """Serialização JSON canônica usada como entrada do hash."""
    if not isinstance(config, dict):
        raise TypeError(
            f"Config para hashing deve ser dict, recebido: {type(config).__name__}"
        )
    return json.dumps(
        config,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
        default=str,
    )


def compute_config_hash(config: Dict[str, Any]) -> str:
    """
    Gera o hash SHA-256 (64 caracteres hexadecimais) da configuração.

    Configurações estruturalmente iguais produzem o mesmo hash,
    independentemente da ordem original das chaves.

    Raises:
        TypeError: se `config` não for um dicionário.
    """
    return hashlib.sha256(canonical_config_json(config).encode("utf-8")).hexdigest()
