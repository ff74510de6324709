# src/buildline/core/config/errors.py
"""
Exceções da camada de configuração do buildline.

Todas herdam de `ConfigError`, permitindo distinguir falhas de
configuração (antes do build) de falhas de transform (durante o build).
"""


class ConfigError(Exception):
    """Exceção base para erros de carregamento e resolução de configuração."""


class DefaultsNotFoundError(ConfigError):
    """
    Arquivo de configuração base (defaults) não encontrado.

    O arquivo de defaults é obrigatório; nenhum arquivo é criado
    automaticamente.
    """


class UnsupportedConfigFormatError(ConfigError):
    """
    Extensão de arquivo de configuração não suportada.

    Formatos suportados (v1): YAML (.yaml, .yml) e JSON (.json).
    O formato nunca é inferido pelo conteúdo.
    """


class InvalidConfigRootTypeError(ConfigError):
    """Conteúdo raiz da configuração não é um mapa (dict)."""


class ConfigTypeConflictError(ConfigError):
    """
    Conflito de tipos durante o deep-merge.

    Exemplo:
        - base:     {"fork": {"max_workers": 4}}
        - override: {"fork": "inline"}
    """
