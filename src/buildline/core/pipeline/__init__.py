# src/buildline/core/pipeline/__init__.py
"""
# Pipeline Core - buildline

Este pacote define os contratos canônicos do motor de type-state:

- **types**: `PayloadKind`, `BranchStatus`, `ForkState`
- **task**: `Task` imutável e `create_task`
- **transform**: `ParamSpec`, `TransformDescriptor`, decorator `transform`
- **registry**: `TransformRegistry` (lookup, validação de kind e parâmetros)
- **context**: `BuildContext`, `Reporter`, `new_context`

## Invariantes

- O kind de uma Task é sempre consistente com a forma do payload
- Nenhum leaf effect executa contra um kind que o transform não declara
- Toda saída humana passa por um Reporter injetado
"""

from .context import BuildContext, MemoryReporter, Reporter, StreamReporter, new_context
from .registry import DuplicateTransformError, TransformRegistry
from .task import Task, create_task
from .transform import ParamSpec, TransformDescriptor, transform
from .types import BranchStatus, ForkState, PayloadKind

__all__ = [
    "BranchStatus",
    "BuildContext",
    "DuplicateTransformError",
    "ForkState",
    "MemoryReporter",
    "ParamSpec",
    "PayloadKind",
    "Reporter",
    "StreamReporter",
    "Task",
    "TransformDescriptor",
    "TransformRegistry",
    "create_task",
    "new_context",
    "transform",
]
