# src/buildline/core/pipeline/task.py
"""
Task - unidade de dado do pipeline do buildline.

Uma Task é um valor imutável que associa um payload ao seu PayloadKind.
A forma do payload é validada na construção, seja via `create_task`,
seja instanciando `Task` diretamente.

Princípios fundamentais:
    - Uma Task nunca é mutada; todo transform produz uma nova Task
    - O kind declarado é sempre consistente com a forma do payload
    - Payloads sequenciais são normalizados para tuplas, tornando seguro
      o compartilhamento read-only entre branches de fork

Invariantes:
    - STRING carrega exatamente um `str`
    - FILES e STRINGS carregam uma tupla de `str` (possivelmente vazia)

Limites explícitos:
    - Não executa transforms
    - Não acessa filesystem
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Tuple, Union

from buildline.core.exceptions import InvalidPayloadShape
from buildline.core.errors import invalid_payload_shape

from .types import PayloadKind


Payload = Union[str, Tuple[str, ...]]


def _coerce_kind(kind: Any) -> PayloadKind:
    if isinstance(kind, PayloadKind):
        return kind
    try:
        return PayloadKind(kind)
    except ValueError:
        raise InvalidPayloadShape(
            message=f"Unknown payload kind: {kind!r}",
            details={"kind": repr(kind), "allowed": [k.value for k in PayloadKind]},
            hint="Use um dos valores de PayloadKind: FILES, STRINGS, STRING.",
        ) from None


def _shape_error(kind: PayloadKind, payload: Any) -> InvalidPayloadShape:
    err = invalid_payload_shape(kind=kind.value, payload_type=type(payload).__name__)
    return InvalidPayloadShape(
        message=f"Payload of type {type(payload).__name__} does not match kind {kind.value}",
        details=err.details,
        hint=err.hint,
    )


@dataclass(frozen=True)
class Task:
    """
    Valor imutável (payload + kind) que flui entre transforms.

    Campos:
        - kind: forma do dado (PayloadKind ou seu valor textual)
        - payload: `str` para STRING, sequência de `str` para FILES/STRINGS

    Regras de forma (verificadas em `__post_init__`):
        - STRING → `str`
        - FILES / STRINGS → `list` ou `tuple` cujos itens são todos `str`
          (um `str` isolado é rejeitado, mesmo sendo iterável)

    Após a construção, `kind` é sempre um PayloadKind e payloads
    sequenciais são tuplas.

    Raises:
        InvalidPayloadShape: kind desconhecido ou payload incompatível.
    """
    kind: PayloadKind
    payload: Payload

    def __post_init__(self) -> None:
        kind = _coerce_kind(self.kind)
        object.__setattr__(self, "kind", kind)

        if kind == PayloadKind.STRING:
            if not isinstance(self.payload, str):
                raise _shape_error(kind, self.payload)
            return

        if not isinstance(self.payload, (list, tuple)):
            raise _shape_error(kind, self.payload)
        if not all(isinstance(item, str) for item in self.payload):
            raise _shape_error(kind, self.payload)
        object.__setattr__(self, "payload", tuple(self.payload))

    @property
    def size(self) -> int:
        """Cardinalidade do payload (1 para STRING)."""
        if self.kind == PayloadKind.STRING:
            return 1
        return len(self.payload)


def create_task(kind: Union[PayloadKind, str], payload: Any) -> Task:
    """
    Cria uma Task a partir de um kind (ou seu valor textual) e um payload.

    Ponto de entrada canônico de um build; a validação de forma é a do
    próprio `Task`.

    Raises:
        InvalidPayloadShape: se o kind for desconhecido ou o payload não
            corresponder à forma exigida.
    """
    return Task(kind=kind, payload=payload)
