"""
Engine do buildline.

Este pacote contém o runtime de encadeamento de transforms e a
primitiva de fork/join.

Componentes principais:
    - engine → `Engine.apply` / `Engine.chain` / `Engine.fork`
    - fork   → ForkCoordinator, JoinHandle, JoinResult, await_join
    - chain  → `Build`, API fluente sobre o Engine

Princípios fundamentais:
    - O Engine é síncrono e single-threaded
    - O fork é a única primitiva de concorrência
    - Nenhum estado global: todo estado de fork pertence ao seu JoinHandle
"""

from .chain import Build
from .engine import Engine
from .fork import (
    BranchResult,
    ForkCoordinator,
    JoinHandle,
    JoinResult,
    await_join,
)

__all__ = [
    "Build",
    "BranchResult",
    "Engine",
    "ForkCoordinator",
    "JoinHandle",
    "JoinResult",
    "await_join",
]
