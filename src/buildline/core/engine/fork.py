# src/buildline/core/engine/fork.py
"""
Coordenador de Fork/Join do buildline.

Este módulo implementa a única primitiva de concorrência do buildline:
dividir uma Task em N branches independentes e sinalizar uma única vez
quando todos reportaram conclusão, em qualquer ordem.

Máquina de estados por instância de fork:
    RUNNING ──(N-ésima conclusão)──▶ ALL_COMPLETE

    - N = 0 → a instância nasce ALL_COMPLETE (join vácuo)
    - cada branch reporta conclusão exatamente uma vez, com sucesso ou falha
    - a falha de um branch não interrompe os demais; ela é registrada e
      exposta no JoinResult

Interface de branch:
    branch(task, report_completion)
    report_completion(value=None, error=None)

    O branch pode reportar de forma síncrona (antes de retornar) ou
    assíncrona (de outra thread, muito depois). Um branch que levanta
    exceção sem ter reportado é registrado como falha.

Conclusão duplicada (erro de programação do branch):
    - engine.strict_completion = true  → DuplicateBranchCompletion é
      levantada para quem reportou e novamente em `wait()`
    - engine.strict_completion = false → a duplicata é ignorada e vira
      warning no BuildContext

Modos de despacho (config `fork.mode`):
    - thread: ThreadPoolExecutor com `fork.max_workers`
    - inline: branches executados em sequência na thread chamadora

Invariantes:
    - A Task de entrada é compartilhada apenas como leitura (Task é imutável)
    - Todo estado (contadores, resultados) pertence a um único JoinHandle
    - O observer `on_join` é chamado exatamente uma vez
    - Uma exceção do observer é relançada por `wait()`, nunca atribuída a um branch
    - JoinResult.branches segue a ordem dos branches, não a ordem de conclusão

Limites explícitos:
    - Não cancela branches (cancelamento é responsabilidade do branch,
      que ainda assim precisa reportar conclusão)
    - Não faz retry
"""

from __future__ import annotations

import threading
import uuid
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Sequence, Tuple

from buildline.core.errors import (
    BRANCH_FAILURE,
    BuildErrorPayload,
    exception_to_error,
)
from buildline.core.exceptions import DuplicateBranchCompletion
from buildline.core.pipeline.context import BuildContext
from buildline.core.pipeline.task import Task
from buildline.core.pipeline.types import BranchStatus, ForkState


CompletionCallback = Callable[..., None]
BranchFn = Callable[[Task, CompletionCallback], Any]
JoinObserver = Callable[["JoinResult"], Any]

FORK_MODES = ("thread", "inline")


@dataclass(frozen=True)
class BranchResult:
    """Resultado registrado de um branch."""
    index: int
    name: str
    status: BranchStatus
    value: Any = None
    error: Optional[BuildErrorPayload] = None

    @property
    def ok(self) -> bool:
        return self.status == BranchStatus.SUCCESS


@dataclass(frozen=True)
class JoinResult:
    """Conjunto de resultados disponível quando o fork atinge ALL_COMPLETE."""
    fork_id: str
    branches: Tuple[BranchResult, ...] = ()

    def __len__(self) -> int:
        return len(self.branches)

    def __iter__(self):
        return iter(self.branches)

    @property
    def succeeded(self) -> List[BranchResult]:
        return [b for b in self.branches if b.status == BranchStatus.SUCCESS]

    @property
    def failed(self) -> List[BranchResult]:
        return [b for b in self.branches if b.status == BranchStatus.FAILED]

    @property
    def ok(self) -> bool:
        return not self.failed


def _branch_name(branch: Any, index: int) -> str:
    name = getattr(branch, "__name__", None)
    if not isinstance(name, str) or not name or name == "<lambda>":
        return f"branch-{index}"
    return name


def _as_error(error: Any, index: int) -> BuildErrorPayload:
    if isinstance(error, BuildErrorPayload):
        return error
    if isinstance(error, BaseException):
        return exception_to_error(error, branch=index)
    return BuildErrorPayload(
        type=BRANCH_FAILURE,
        message=str(error) or "branch reported failure",
        details={"branch": index},
    )


class JoinHandle:
    """
    Estado de uma instância de fork (contador de conclusões + resultados).

    Criado por `ForkCoordinator.fork`; consumido por `wait()` / `await_join`.
    """

    def __init__(
        self,
        *,
        names: Sequence[str],
        ctx: BuildContext,
        strict: bool = True,
        on_join: Optional[JoinObserver] = None,
        fork_id: Optional[str] = None,
    ):
        self.fork_id: str = fork_id or f"fork-{uuid.uuid4().hex[:8]}"
        self.names: Tuple[str, ...] = tuple(names)
        self.ctx = ctx
        self.strict = strict
        self._on_join = on_join

        self._lock = threading.Lock()
        self._done = threading.Event()
        self._results: List[Optional[BranchResult]] = [None] * len(self.names)
        self._completed = 0
        self._violations: List[DuplicateBranchCompletion] = []
        self._join_result: Optional[JoinResult] = None
        self._observer_error: Optional[Exception] = None

    # -----------------------------
    # Estado
    # -----------------------------
    @property
    def total(self) -> int:
        return len(self.names)

    @property
    def completed(self) -> int:
        with self._lock:
            return self._completed

    @property
    def state(self) -> ForkState:
        return ForkState.ALL_COMPLETE if self._done.is_set() else ForkState.RUNNING

    def done(self) -> bool:
        return self._done.is_set()

    def is_reported(self, index: int) -> bool:
        with self._lock:
            return self._results[index] is not None

    # -----------------------------
    # Conclusão de branches
    # -----------------------------
    def completion(self, index: int) -> CompletionCallback:
        """Callback `report_completion(value=None, error=None)` do branch `index`."""
        if not 0 <= index < self.total:
            raise IndexError(f"branch index out of range: {index}")

        def report_completion(value: Any = None, error: Any = None) -> None:
            self._record(index, value=value, error=error)

        return report_completion

    def _record(self, index: int, *, value: Any = None, error: Any = None, only_if_pending: bool = False) -> bool:
        name = self.names[index]
        if error is not None:
            result = BranchResult(
                index=index,
                name=name,
                status=BranchStatus.FAILED,
                error=_as_error(error, index),
            )
        else:
            result = BranchResult(index=index, name=name, status=BranchStatus.SUCCESS, value=value)

        with self._lock:
            if self._results[index] is not None:
                if only_if_pending:
                    return False
                duplicate = DuplicateBranchCompletion(
                    message=f"Branch {name} reported completion more than once",
                    details={"fork_id": self.fork_id, "branch": index, "name": name},
                    hint="Garanta que report_completion seja chamado exatamente uma vez por branch.",
                )
                if self.strict:
                    self._violations.append(duplicate)
            else:
                duplicate = None
                self._results[index] = result
                self._completed += 1
                completed = self._completed
                finished = self._completed == self.total
                if finished:
                    self._join_result = JoinResult(
                        fork_id=self.fork_id,
                        branches=tuple(r for r in self._results if r is not None),
                    )

        if duplicate is not None:
            self.ctx.log(
                source=self.fork_id,
                level="error" if self.strict else "warning",
                message="duplicate branch completion",
                branch=index,
                name=name,
            )
            if self.strict:
                raise duplicate
            self.ctx.add_warning(source=self.fork_id, message=duplicate.message)
            return False

        self.ctx.log(
            source=self.fork_id,
            level="info" if result.ok else "error",
            message="branch completed" if result.ok else "branch failed",
            branch=index,
            name=name,
            completed=completed,
            total=self.total,
        )
        if finished:
            self._finish()
        return True

    def _finish(self) -> None:
        """
        Conclui o fork: registra o JoinResult, chama o observer e libera `wait()`.

        O observer roda antes de o evento ser sinalizado. Uma exceção do
        observer nunca volta para o branch que fez a última conclusão; ela
        fica no handle e é relançada por `wait()`, qualquer que seja o modo
        de despacho.
        """
        with self._lock:
            if self._join_result is None:
                self._join_result = JoinResult(fork_id=self.fork_id)
            result = self._join_result
        self.ctx.log(
            source=self.fork_id,
            level="info" if result.ok else "warning",
            message="all branches complete",
            total=self.total,
            failed=len(result.failed),
        )
        if self._on_join is not None:
            try:
                self._on_join(result)
            except Exception as exc:
                self._observer_error = exc
                self.ctx.log(
                    source=self.fork_id,
                    level="error",
                    message="join observer failed",
                    exc_type=exc.__class__.__name__,
                    exc_message=str(exc),
                )
        self._done.set()

    def fail_if_pending(self, index: int, exc: BaseException) -> bool:
        """Registra falha para um branch que levantou exceção antes de reportar."""
        return self._record(index, error=exc, only_if_pending=True)

    # -----------------------------
    # Join
    # -----------------------------
    def wait(self, timeout: Optional[float] = None) -> JoinResult:
        """
        Bloqueia até ALL_COMPLETE e retorna o JoinResult.

        Raises:
            TimeoutError: se `timeout` expirar com branches pendentes.
            DuplicateBranchCompletion: em modo estrito, se algum branch
                reportou conclusão mais de uma vez.
            Exception: a exceção levantada pelo observer `on_join`, se houver.
        """
        if not self._done.wait(timeout):
            raise TimeoutError(
                f"{self.fork_id}: {self.total - self.completed} of {self.total} branches still pending"
            )
        with self._lock:
            if self._violations:
                raise self._violations[0]
            result = self._join_result
        if self._observer_error is not None:
            raise self._observer_error
        if result is None:
            raise RuntimeError(f"{self.fork_id}: join signalled without a result")
        return result


class ForkCoordinator:
    """
    Despacha branches de fork e devolve o JoinHandle correspondente.

    Não mantém estado entre forks: cada chamada a `fork` cria um novo
    JoinHandle, descartado após o join.
    """

    def __init__(
        self,
        *,
        ctx: BuildContext,
        mode: str = "thread",
        max_workers: int = 4,
        strict: bool = True,
    ):
        if mode not in FORK_MODES:
            raise ValueError(f"fork mode must be one of {FORK_MODES}, got {mode!r}")
        if int(max_workers) < 1:
            raise ValueError("fork max_workers must be >= 1")
        self.ctx = ctx
        self.mode = mode
        self.max_workers = int(max_workers)
        self.strict = bool(strict)

    @classmethod
    def from_context(cls, ctx: BuildContext) -> "ForkCoordinator":
        fork_cfg = ctx.section("fork")
        engine_cfg = ctx.section("engine")
        return cls(
            ctx=ctx,
            mode=str(fork_cfg.get("mode", "thread")),
            max_workers=int(fork_cfg.get("max_workers", 4)),
            strict=bool(engine_cfg.get("strict_completion", True)),
        )

    def _run_branch(self, handle: JoinHandle, index: int, branch: BranchFn, task: Task) -> None:
        try:
            branch(task, handle.completion(index))
        except DuplicateBranchCompletion:
            # já registrada no handle; reaparece em wait()
            return
        except Exception as exc:
            if not handle.fail_if_pending(index, exc):
                self.ctx.log(
                    source=handle.fork_id,
                    level="warning",
                    message="branch raised after reporting completion",
                    branch=index,
                    exc_type=exc.__class__.__name__,
                    exc_message=str(exc),
                )
                self.ctx.add_warning(
                    source=handle.fork_id,
                    message=f"{handle.names[index]} raised after completion: {exc}",
                )

    def fork(
        self,
        task: Task,
        branches: Sequence[BranchFn],
        *,
        on_join: Optional[JoinObserver] = None,
    ) -> JoinHandle:
        if not isinstance(task, Task):
            raise TypeError("fork requires a Task")
        branches = list(branches)
        for i, b in enumerate(branches):
            if not callable(b):
                raise TypeError(f"branch {i} is not callable")

        handle = JoinHandle(
            names=[_branch_name(b, i) for i, b in enumerate(branches)],
            ctx=self.ctx,
            strict=self.strict,
            on_join=on_join,
        )
        self.ctx.log(
            source=handle.fork_id,
            level="info",
            message="fork started",
            branches=len(branches),
            mode=self.mode,
            kind=task.kind.value,
        )

        if not branches:
            handle._finish()
            return handle

        if self.mode == "inline":
            for index, branch in enumerate(branches):
                self._run_branch(handle, index, branch, task)
            return handle

        executor = ThreadPoolExecutor(
            max_workers=min(self.max_workers, len(branches)),
            thread_name_prefix=handle.fork_id,
        )
        for index, branch in enumerate(branches):
            executor.submit(self._run_branch, handle, index, branch, task)
        # os workers terminam a fila pendente mesmo sem wait
        executor.shutdown(wait=False)
        return handle


def await_join(handle: JoinHandle, timeout: Optional[float] = None) -> JoinResult:
    """Aguarda o join de um fork (atalho para `handle.wait`)."""
    return handle.wait(timeout)
