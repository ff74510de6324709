"""
buildline - Canonical Exceptions (v1)

Este módulo define as exceções tipadas internas do buildline.

Objetivo:
- Permitir que Registry/Engine/Fork levantem exceções semânticas tipadas
- Facilitar o mapeamento determinístico para BuildErrorPayload
- Evitar TypeError/ValueError genéricos nas verificações de legalidade

Regras:
- Não contém lógica de leaf effects.
- Exceções devem carregar apenas dados estruturados (serializáveis).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class BuildlineException(Exception):
    """Base class para exceções internas do buildline.

    Importante:
    - Sempre carregar dados estruturados em `details`
    - Mensagem deve ser curta e humana
    """

    message: str
    details: Dict[str, Any]
    hint: Optional[str] = None

    def __str__(self) -> str:  # pragma: no cover
        return self.message


# ---------------------------------------------------------------------------
# Task / Payload
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class InvalidPayloadShape(BuildlineException):
    """Forma estrutural do payload não corresponde ao PayloadKind declarado."""


# ---------------------------------------------------------------------------
# Registry / Legalidade
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class UnknownTransform(BuildlineException):
    """Nome de transform não registrado no TransformRegistry."""


@dataclass(frozen=True)
class IncompatibleKind(BuildlineException):
    """Transform invocado sobre um PayloadKind que ele não aceita."""


@dataclass(frozen=True)
class InvalidTransformParams(BuildlineException):
    """Parâmetros ausentes, desconhecidos ou de tipo inválido para o transform."""


# ---------------------------------------------------------------------------
# Execução
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class LeafEffectFailure(BuildlineException):
    """Falha reportada pelo leaf effect (encapsulada, causa original em __cause__)."""


@dataclass(frozen=True)
class DuplicateBranchCompletion(BuildlineException):
    """Branch de um fork reportou conclusão mais de uma vez (erro de programação)."""
