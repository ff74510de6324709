# src/buildline/core/engine/chain.py
"""
Encadeamento fluente sobre o Engine.

Permite escrever um build como uma cadeia de chamadas:

    Build.start(engine, PayloadKind.FILES, ["a.js", "b.js"]) \\
        .concat() \\
        .minify() \\
        .write(filename="dist/app.min.js")

Cada passo delega para `engine.apply` e devolve um novo `Build`
envolvendo a Task resultante; o `Build` original não é alterado.
Nomes de transforms registrados ficam disponíveis como métodos.
"""

from __future__ import annotations

from typing import Any, Callable, Optional, Sequence, Union

from buildline.core.pipeline.task import Task, create_task
from buildline.core.pipeline.types import PayloadKind

from .engine import Engine
from .fork import BranchFn, JoinHandle, JoinObserver


class Build:
    """Par (engine, task) imutável com API fluente."""

    __slots__ = ("engine", "task")

    def __init__(self, engine: Engine, task: Task):
        object.__setattr__(self, "engine", engine)
        object.__setattr__(self, "task", task)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("Build is immutable; each step returns a new Build")

    @classmethod
    def start(cls, engine: Engine, kind: Union[PayloadKind, str], payload: Any) -> "Build":
        return cls(engine, create_task(kind, payload))

    def then(self, name: str, **params: Any) -> "Build":
        return Build(self.engine, self.engine.apply(self.task, name, params))

    def fork(self, branches: Sequence[BranchFn], *, on_join: Optional[JoinObserver] = None) -> JoinHandle:
        return self.engine.fork(self.task, branches, on_join=on_join)

    def __getattr__(self, name: str) -> Callable[..., "Build"]:
        if name.startswith("_") or name not in self.engine.registry:
            raise AttributeError(name)

        def step(**params: Any) -> "Build":
            return self.then(name, **params)

        step.__name__ = name
        return step

    def __repr__(self) -> str:
        return f"Build(kind={self.task.kind.value}, size={self.task.size})"
