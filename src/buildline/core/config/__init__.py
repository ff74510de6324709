# src/buildline/core/config/__init__.py
"""
Camada de configuração do buildline.

A configuração controla políticas do runtime, nunca a estrutura do build:

    engine:
      strict_completion: true   # conclusão duplicada de branch → erro
    fork:
      mode: thread              # thread | inline
      max_workers: 4
    transforms:                 # defaults de parâmetros por transform
      jslint:
        max_line_length: 100

Responsabilidades do pacote:
    - carregamento de arquivos YAML/JSON (defaults + overrides locais)
    - deep-merge determinístico
    - hash canônico para rastreabilidade
"""

from .defaults import DEFAULT_CONFIG
from .errors import (
    ConfigError,
    ConfigTypeConflictError,
    DefaultsNotFoundError,
    InvalidConfigRootTypeError,
    UnsupportedConfigFormatError,
)
from .hashing import compute_config_hash
from .loader import load_config
from .merge import deep_merge

__all__ = [
    "DEFAULT_CONFIG",
    "ConfigError",
    "ConfigTypeConflictError",
    "DefaultsNotFoundError",
    "InvalidConfigRootTypeError",
    "UnsupportedConfigFormatError",
    "compute_config_hash",
    "deep_merge",
    "load_config",
]
