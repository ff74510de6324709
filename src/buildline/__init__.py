# src/buildline/__init__.py
"""
buildline - pipeline encadeável de tarefas de build.

Um build é uma sequência de transforms aplicados a uma Task tipada
(lista de arquivos, coleção de strings ou uma única string). Cada
transform declara quais kinds aceita e qual kind produz; o Engine
recusa combinações ilegais antes de qualquer efeito colateral.
O fluxo pode ser dividido em branches paralelos (fork) com um único
sinal de conclusão (join).

Exemplo:

    engine = default_engine()
    task = create_task(PayloadKind.STRINGS, ["a", "b"])
    engine.apply(task, "concat").payload   # "a,b"

Limites explícitos:
    - Não modela grafo de dependências entre targets
    - Não implementa cache incremental
    - Não define DSL de arquivo de build
"""

from typing import Any, Dict, Optional

from .core.engine import Build, Engine, JoinHandle, JoinResult, await_join
from .core.exceptions import (
    BuildlineException,
    DuplicateBranchCompletion,
    IncompatibleKind,
    InvalidPayloadShape,
    InvalidTransformParams,
    LeafEffectFailure,
    UnknownTransform,
)
from .core.pipeline import (
    BuildContext,
    PayloadKind,
    Reporter,
    Task,
    TransformRegistry,
    create_task,
    new_context,
)
from .effects import default_registry


def default_engine(
    *,
    config: Optional[Dict[str, Any]] = None,
    reporter: Optional[Reporter] = None,
) -> Engine:
    """Engine com todos os transforms padrão registrados e um novo BuildContext."""
    return Engine(registry=default_registry(), ctx=new_context(config=config, reporter=reporter))


__all__ = [
    "Build",
    "BuildContext",
    "BuildlineException",
    "DuplicateBranchCompletion",
    "Engine",
    "IncompatibleKind",
    "InvalidPayloadShape",
    "InvalidTransformParams",
    "JoinHandle",
    "JoinResult",
    "LeafEffectFailure",
    "PayloadKind",
    "Task",
    "TransformRegistry",
    "UnknownTransform",
    "await_join",
    "create_task",
    "default_engine",
    "default_registry",
    "new_context",
]
