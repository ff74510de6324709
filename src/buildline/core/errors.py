"""
buildline - Canonical Error Structures (v1)

Este módulo define o padrão canônico de erros do buildline.
Erros reportados por branches de fork e por transforms são tratados como
dados, devendo ser:

- explícitos
- serializáveis
- rastreáveis

Nenhum retry ou recuperação implícita é aplicado.
"""

from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Any, Dict, List, Optional

from .exceptions import BuildlineException


# ---------------------------------------------------------------------------
# Payload canônico
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class BuildErrorPayload:
    """
    Payload canônico de erro do buildline.

    Campos:
    - type: código estável do erro (não é texto livre)
    - message: mensagem curta, humana e objetiva
    - details: dados estruturados relevantes para diagnóstico
    - hint: ação sugerida ao operador (onde corrigir)
    """

    type: str
    message: str
    details: Dict[str, Any]
    hint: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Retorna representação serializável do erro."""
        # o chamador deve garantir que details seja serializável
        return asdict(self)


# ---------------------------------------------------------------------------
# Catálogo canônico de tipos de erro (v1)
# ---------------------------------------------------------------------------

# Task / Registry
INVALID_PAYLOAD_SHAPE = "INVALID_PAYLOAD_SHAPE"
UNKNOWN_TRANSFORM = "UNKNOWN_TRANSFORM"
INCOMPATIBLE_KIND = "INCOMPATIBLE_KIND"
INVALID_TRANSFORM_PARAMS = "INVALID_TRANSFORM_PARAMS"

# Execução
LEAF_EFFECT_FAILURE = "LEAF_EFFECT_FAILURE"
DUPLICATE_BRANCH_COMPLETION = "DUPLICATE_BRANCH_COMPLETION"
BRANCH_FAILURE = "BRANCH_FAILURE"

_EXCEPTION_CODES: Dict[str, str] = {
    "InvalidPayloadShape": INVALID_PAYLOAD_SHAPE,
    "UnknownTransform": UNKNOWN_TRANSFORM,
    "IncompatibleKind": INCOMPATIBLE_KIND,
    "InvalidTransformParams": INVALID_TRANSFORM_PARAMS,
    "LeafEffectFailure": LEAF_EFFECT_FAILURE,
    "DuplicateBranchCompletion": DUPLICATE_BRANCH_COMPLETION,
}


# ---------------------------------------------------------------------------
# Helpers de fábrica
# ---------------------------------------------------------------------------

def invalid_payload_shape(
    *,
    kind: str,
    payload_type: str,
    hint: str = "Crie a Task com um payload compatível: STRING exige str, FILES/STRINGS exigem sequência de str.",
) -> BuildErrorPayload:
    return BuildErrorPayload(
        type=INVALID_PAYLOAD_SHAPE,
        message="Payload incompatível com o kind declarado",
        details={"kind": kind, "payload_type": payload_type},
        hint=hint,
    )


def unknown_transform(
    *,
    name: str,
    available: List[str],
    hint: str = "Registre o transform no TransformRegistry antes de aplicá-lo.",
) -> BuildErrorPayload:
    return BuildErrorPayload(
        type=UNKNOWN_TRANSFORM,
        message="Transform não registrado",
        details={"name": name, "available": available},
        hint=hint,
    )


def incompatible_kind(
    *,
    transform: str,
    kind: str,
    accepted: List[str],
    hint: str = "Converta a Task para um kind aceito (ex.: concat) antes de aplicar o transform.",
) -> BuildErrorPayload:
    return BuildErrorPayload(
        type=INCOMPATIBLE_KIND,
        message="Transform não aceita o kind da Task",
        details={"transform": transform, "kind": kind, "accepted": accepted},
        hint=hint,
    )


def leaf_effect_failure(
    *,
    transform: str,
    exc_type: Optional[str] = None,
    exc_message: Optional[str] = None,
    hint: str = "Verifique os parâmetros e os arquivos de entrada do transform. Nenhum retry é aplicado automaticamente.",
) -> BuildErrorPayload:
    return BuildErrorPayload(
        type=LEAF_EFFECT_FAILURE,
        message="Falha no leaf effect do transform",
        details={
            "transform": transform,
            "exc_type": exc_type,
            "exc_message": exc_message,
        },
        hint=hint,
    )


def exception_to_error(exc: BaseException, *, branch: Optional[int] = None) -> BuildErrorPayload:
    """Converte exceções em BuildErrorPayload (serializável, sem stack trace).

    Regras:
    - BuildlineException: já vem com message/details/hint; o código é
      derivado do nome da classe.
    - Outras exceções: encapsuladas como BRANCH_FAILURE.
    """
    if isinstance(exc, BuildlineException):
        details = dict(exc.details or {})
        if branch is not None:
            details.setdefault("branch", branch)
        return BuildErrorPayload(
            type=_EXCEPTION_CODES.get(exc.__class__.__name__, exc.__class__.__name__),
            message=str(exc) or "Erro de execução",
            details=details,
            hint=exc.hint,
        )

    return BuildErrorPayload(
        type=BRANCH_FAILURE,
        message=str(exc) or "Erro inesperado durante execução do branch",
        details={"branch": branch, "exception_class": exc.__class__.__name__},
        hint="Inspecione o branch correspondente; os demais branches não foram afetados.",
    )
