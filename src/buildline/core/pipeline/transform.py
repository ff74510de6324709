# src/buildline/core/pipeline/transform.py
"""
Contrato canônico de Transform do buildline.

Um Transform é uma operação nomeada e registrada que declara:
    - o conjunto de PayloadKind que aceita
    - os parâmetros que exige (com defaults)
    - a regra de kind de saída (função total sobre os kinds aceitos)
    - o leaf effect que executa o trabalho concreto

Interface do leaf effect:
    effect(payload, params, ctx) -> novo payload      (transform normal)
    effect(payload, params, ctx) -> None              (transform terminal)

    Quando o trabalho depende do kind (ex.: concat em STRINGS vs FILES,
    ambos tuplas de str), o descritor recebe uma tabela {kind: effect}
    em vez de um único callable; o despacho é exaustivo e verificado na
    construção do descritor, sem testes de tipo dentro do leaf effect.

Transforms terminais (log, lint, invoke) não produzem uma nova Task; o
Engine devolve a própria Task de entrada (pass-through), permitindo que
o encadeamento continue.

Invariantes:
    - `accepts` nunca é vazio
    - Todo transform não terminal declara `output_kind`
    - A regra de saída recebe a Task completa, pois a cardinalidade do
      payload pode mudar o kind produzido (ex.: minify em FILES)

Limites explícitos:
    - Não valida Tasks (responsabilidade do registry)
    - Não executa leaf effects (responsabilidade do Engine)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, FrozenSet, Iterable, Mapping, Optional, Tuple, Union

from .task import Task
from .types import PayloadKind


LeafEffect = Callable[..., Any]
OutputRule = Union[PayloadKind, Callable[[Task], PayloadKind]]


def _first_line(doc: Optional[str]) -> str:
    lines = (doc or "").strip().splitlines()
    return lines[0].strip() if lines else ""


@dataclass(frozen=True)
class ParamSpec:
    """Declaração de um parâmetro de transform.

    - required: o parâmetro deve ser informado (config ou chamada)
    - default: valor usado quando ausente e não obrigatório
    - types: tipos aceitos (vazio = qualquer tipo)
    """
    name: str
    required: bool = False
    default: Any = None
    types: Tuple[type, ...] = ()


@dataclass(frozen=True, eq=False)
class TransformDescriptor:
    """
    Descritor imutável de um transform registrado.

    Campos:
        - name: identificador único no registry
        - accepts: kinds aceitos como entrada
        - effect: leaf effect `(payload, params, ctx)`, ou tabela
          `{PayloadKind: leaf effect}` com exatamente uma entrada por kind
          aceito (despacho exaustivo por kind)
        - output_kind: PayloadKind fixo ou função `(task) -> PayloadKind`
        - params: parâmetros declarados
        - terminal: transform de efeito colateral com pass-through da Task
        - description: texto curto para inspeção
    """
    name: str
    accepts: FrozenSet[PayloadKind]
    effect: Union[LeafEffect, Mapping[PayloadKind, LeafEffect]]
    output_kind: Optional[OutputRule] = None
    params: Tuple[ParamSpec, ...] = field(default_factory=tuple)
    terminal: bool = False
    description: str = ""

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name.strip():
            raise ValueError("transform name must be a non-empty string")
        # normaliza para frozenset de PayloadKind
        object.__setattr__(self, "accepts", frozenset(PayloadKind(k) for k in self.accepts))
        object.__setattr__(self, "params", tuple(self.params))
        if not self.accepts:
            raise ValueError(f"transform '{self.name}' must accept at least one payload kind")
        if not self.terminal and self.output_kind is None:
            raise ValueError(f"non-terminal transform '{self.name}' must declare output_kind")

        if isinstance(self.effect, Mapping):
            table = {PayloadKind(k): fn for k, fn in self.effect.items()}
            if set(table) != set(self.accepts):
                raise ValueError(
                    f"transform '{self.name}' effect table must cover exactly its accepted kinds"
                )
            if not all(callable(fn) for fn in table.values()):
                raise ValueError(f"transform '{self.name}' effect table values must be callable")
            object.__setattr__(self, "effect", MappingProxyType(table))
        elif not callable(self.effect):
            raise ValueError(f"transform '{self.name}' effect must be callable")

    def effect_for(self, kind: PayloadKind) -> LeafEffect:
        """Leaf effect a ser chamado para uma Task do kind informado."""
        if isinstance(self.effect, Mapping):
            return self.effect[kind]
        return self.effect

    def resolve_output_kind(self, task: Task) -> PayloadKind:
        """Resolve o kind de saída a partir da Task completa (kind + payload)."""
        if self.terminal:
            return task.kind
        rule = self.output_kind
        if isinstance(rule, PayloadKind):
            return rule
        return PayloadKind(rule(task))  # type: ignore[misc]

    def param(self, name: str) -> Optional[ParamSpec]:
        for spec in self.params:
            if spec.name == name:
                return spec
        return None


def transform(
    name: str,
    *,
    accepts: Iterable[PayloadKind],
    output_kind: Optional[OutputRule] = None,
    params: Iterable[ParamSpec] = (),
    terminal: bool = False,
    description: str = "",
) -> Callable[[LeafEffect], TransformDescriptor]:
    """Decorator que transforma um leaf effect em TransformDescriptor."""

    def wrapper(effect: LeafEffect) -> TransformDescriptor:
        return TransformDescriptor(
            name=name,
            accepts=frozenset(accepts),
            effect=effect,
            output_kind=output_kind,
            params=tuple(params),
            terminal=terminal,
            description=description or _first_line(effect.__doc__),
        )

    return wrapper
