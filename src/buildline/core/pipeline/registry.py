# src/buildline/core/pipeline/registry.py
"""
Registro de Transforms e verificação de legalidade.

Este módulo define o `TransformRegistry`, responsável por registrar
TransformDescriptors por nome e validar, antes de qualquer leaf effect,
se um transform pode ser aplicado a uma Task.

O registry atua como a única superfície de erro de legalidade:
    - nome desconhecido → UnknownTransform
    - kind não aceito → IncompatibleKind
    - parâmetros inválidos → InvalidTransformParams

Decisões arquiteturais:
    - Transforms são parciais por natureza (replace faz sentido em texto,
      não em lista de arquivos); a legalidade é uma pré-condição explícita
    - A ordem de registro é preservada separadamente do armazenamento
    - Nomes duplicados são tratados como falha fatal de configuração

Invariantes:
    - Cada transform registrado possui um nome único
    - `validate` nunca executa leaf effects

Limites explícitos:
    - Não executa transforms
    - Não interage com BuildContext
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from buildline.core.errors import incompatible_kind, unknown_transform
from buildline.core.exceptions import (
    IncompatibleKind,
    InvalidTransformParams,
    UnknownTransform,
)

from .task import Task
from .transform import TransformDescriptor


class DuplicateTransformError(ValueError):
    """
    Exceção levantada quando dois transforms são registrados com o mesmo nome.

    Decisões arquiteturais:
        - Nomes de transform são a chave de despacho do Engine
        - A duplicidade é detectada no registro, antes de qualquer build

    Limites explícitos:
        - Não substitui silenciosamente o transform anterior
    """


def _sorted_kinds(descriptor: TransformDescriptor) -> List[str]:
    return sorted(k.value for k in descriptor.accepts)


@dataclass
class TransformRegistry:
    """
    Registro canônico de TransformDescriptors.

    Decisões arquiteturais:
        - Leaf effects são registrados por nome no início do processo
        - A validação de kind ocorre antes de qualquer efeito colateral
        - A estrutura interna não é exposta diretamente

    Invariantes:
        - Cada nome é único no registry
        - `list()` reflete exatamente a ordem de registro
    """

    _transforms: Dict[str, TransformDescriptor] = field(default_factory=dict, init=False, repr=False)
    _order: List[str] = field(default_factory=list, init=False, repr=False)

    def add(self, descriptor: TransformDescriptor) -> None:
        if not isinstance(descriptor, TransformDescriptor):
            raise TypeError("registry only accepts TransformDescriptor instances")

        if descriptor.name in self._transforms:
            raise DuplicateTransformError(f"Duplicate transform name: {descriptor.name}")

        self._transforms[descriptor.name] = descriptor
        self._order.append(descriptor.name)

    def __contains__(self, name: object) -> bool:
        return name in self._transforms

    def names(self) -> List[str]:
        return list(self._order)

    def list(self) -> List[TransformDescriptor]:
        return [self._transforms[n] for n in self._order]

    def lookup(self, name: str) -> TransformDescriptor:
        if name not in self._transforms:
            err = unknown_transform(name=str(name), available=self.names())
            raise UnknownTransform(
                message=f"Unknown transform: {name}",
                details=err.details,
                hint=err.hint,
            )
        return self._transforms[name]

    def validate(self, descriptor: TransformDescriptor, task: Task) -> None:
        """Falha com IncompatibleKind quando `task.kind` não é aceito pelo transform."""
        if task.kind in descriptor.accepts:
            return

        err = incompatible_kind(
            transform=descriptor.name,
            kind=task.kind.value,
            accepted=_sorted_kinds(descriptor),
        )
        raise IncompatibleKind(
            message=f"{descriptor.name} does not support the {task.kind.value} payload kind",
            details=err.details,
            hint=err.hint,
        )

    def validate_params(
        self,
        descriptor: TransformDescriptor,
        params: Optional[Mapping[str, Any]] = None,
    ) -> Dict[str, Any]:
        """
        Resolve os parâmetros efetivos de um transform.

        Política:
            - parâmetros desconhecidos → erro
            - parâmetro obrigatório ausente (ou None) → erro
            - parâmetro opcional ausente → default declarado
            - tipos declarados são verificados com isinstance

        Returns:
            Dict[str, Any]: novo dicionário com todos os parâmetros declarados.

        Raises:
            InvalidTransformParams
        """
        given = dict(params or {})
        declared = {spec.name for spec in descriptor.params}

        unknown = sorted(k for k in given if k not in declared)
        if unknown:
            raise InvalidTransformParams(
                message=f"{descriptor.name} got unknown parameters: {', '.join(unknown)}",
                details={"transform": descriptor.name, "unknown": unknown, "declared": sorted(declared)},
            )

        resolved: Dict[str, Any] = {}
        for spec in descriptor.params:
            value = given.get(spec.name)
            if value is None:
                if spec.required:
                    raise InvalidTransformParams(
                        message=f"{descriptor.name} requires parameter '{spec.name}'",
                        details={"transform": descriptor.name, "missing": spec.name},
                        hint="Informe o parâmetro na chamada ou em config.transforms.",
                    )
                resolved[spec.name] = spec.default
                continue

            if spec.types and not isinstance(value, spec.types):
                raise InvalidTransformParams(
                    message=f"{descriptor.name} parameter '{spec.name}' has invalid type {type(value).__name__}",
                    details={
                        "transform": descriptor.name,
                        "param": spec.name,
                        "expected": [t.__name__ for t in spec.types],
                        "received": type(value).__name__,
                    },
                )
            resolved[spec.name] = value

        return resolved
