# src/buildline/core/engine/engine.py
"""
Engine de execução do pipeline do buildline.

O Engine sequencia Task → Transform → Task de forma síncrona: cada
`apply` termina (ou falha) antes do próximo, pois a saída de um passo
é a entrada do seguinte.

Passos de `apply(task, name, params)`:
    1. resolve o descritor no registry          (UnknownTransform)
    2. valida o kind da Task                     (IncompatibleKind)
    3. resolve parâmetros (config + chamada)     (InvalidTransformParams)
    4. resolve o kind de saída a partir da Task completa
    5. executa o leaf effect                     (LeafEffectFailure)
    6. encapsula o resultado em uma nova Task    (InvalidPayloadShape)

Os passos 1–4 nunca executam efeitos colaterais. Transforms terminais
retornam a própria Task de entrada (pass-through).

Política de falha:
    - Qualquer falha interrompe o passo corrente e é propagada tipada
    - Nenhum retry, nenhuma recuperação parcial: o chamador decide

Parâmetros vindos de configuração:
    `config["transforms"][name]` fornece defaults que os parâmetros
    explícitos da chamada sobrescrevem.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, Mapping, Optional, Sequence, Tuple, Union

from buildline.core.errors import leaf_effect_failure
from buildline.core.exceptions import BuildlineException, LeafEffectFailure
from buildline.core.pipeline.context import BuildContext
from buildline.core.pipeline.registry import TransformRegistry
from buildline.core.pipeline.task import Task, create_task

from .fork import BranchFn, ForkCoordinator, JoinHandle, JoinObserver


StepSpec = Union[str, Tuple[str, Optional[Mapping[str, Any]]]]


class Engine:
    """Engine canônico do buildline (apply + chain + fork)."""

    def __init__(self, *, registry: TransformRegistry, ctx: BuildContext):
        self.registry = registry
        self.ctx = ctx

    def _configured_params(self, name: str) -> Dict[str, Any]:
        transforms_cfg = self.ctx.section("transforms")
        cfg = transforms_cfg.get(name, {}) or {}
        return dict(cfg) if isinstance(cfg, dict) else {}

    def apply(self, task: Task, name: str, params: Optional[Mapping[str, Any]] = None) -> Task:
        if not isinstance(task, Task):
            raise TypeError("apply requires a Task")

        descriptor = self.registry.lookup(name)
        self.registry.validate(descriptor, task)

        merged = self._configured_params(name)
        merged.update(dict(params or {}))
        resolved = self.registry.validate_params(descriptor, merged)

        output_kind = descriptor.resolve_output_kind(task)

        self.ctx.log(
            source=name,
            level="info",
            message="transform started",
            kind=task.kind.value,
            size=task.size,
        )

        try:
            output = descriptor.effect_for(task.kind)(task.payload, resolved, self.ctx)
        except BuildlineException as exc:
            self.ctx.log(
                source=name,
                level="error",
                message="transform failed",
                error_type=exc.__class__.__name__,
                error_message=str(exc),
            )
            raise
        except Exception as exc:
            err = leaf_effect_failure(
                transform=name,
                exc_type=exc.__class__.__name__,
                exc_message=str(exc) or None,
            )
            self.ctx.log(
                source=name,
                level="error",
                message="transform failed",
                error_type=exc.__class__.__name__,
                error_message=str(exc),
            )
            raise LeafEffectFailure(
                message=f"{name} failed: {exc.__class__.__name__}: {exc}",
                details=err.details,
                hint=err.hint,
            ) from exc

        if descriptor.terminal:
            self.ctx.log(source=name, level="info", message="transform done (pass-through)")
            return task

        result = create_task(output_kind, output)
        self.ctx.log(
            source=name,
            level="info",
            message="transform done",
            kind=result.kind.value,
            size=result.size,
        )
        return result

    def chain(self, task: Task, steps: Iterable[StepSpec]) -> Task:
        """
        Aplica uma sequência de transforms.

        Cada item é um nome (`"concat"`) ou um par `(nome, params)`.
        Equivale a `apply(apply(task, a, pa), b, pb)`; nenhum estado é
        mantido entre os passos além da Task retornada.
        """
        current = task
        for step in steps:
            if isinstance(step, str):
                name, params = step, None
            else:
                name, params = step
            current = self.apply(current, name, params)
        return current

    def fork(
        self,
        task: Task,
        branches: Sequence[BranchFn],
        *,
        on_join: Optional[JoinObserver] = None,
    ) -> JoinHandle:
        """Divide o fluxo em branches paralelos (ver `buildline.core.engine.fork`)."""
        return ForkCoordinator.from_context(self.ctx).fork(task, branches, on_join=on_join)
