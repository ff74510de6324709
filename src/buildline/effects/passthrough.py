"""Transforms terminais de observação: log e invoke.

Ambos devolvem a Task de entrada sem alterações.
"""

from __future__ import annotations

from typing import Any, Dict, Sequence

from buildline.core.pipeline.context import BuildContext
from buildline.core.pipeline.transform import ParamSpec, TransformDescriptor, transform
from buildline.core.pipeline.types import PayloadKind

from .fs import ALL_KINDS


def _log_text(payload: str, params: Dict[str, Any], ctx: BuildContext) -> None:
    ctx.reporter.report(source="log", message=payload)


def _log_lines(payload: Sequence[str], params: Dict[str, Any], ctx: BuildContext) -> None:
    ctx.reporter.report(source="log", message="\n".join(payload))


log = TransformDescriptor(
    name="log",
    accepts=frozenset(ALL_KINDS),
    effect={
        PayloadKind.STRING: _log_text,
        PayloadKind.STRINGS: _log_lines,
        PayloadKind.FILES: _log_lines,
    },
    terminal=True,
    description="Envia o payload ao reporter (itens de sequência, um por linha).",
)


@transform(
    "invoke",
    accepts=ALL_KINDS,
    terminal=True,
    params=[ParamSpec("fn", required=True)],
)
def invoke(payload: Any, params: Dict[str, Any], ctx: BuildContext) -> None:
    """Chama `fn(payload)`; o retorno é descartado."""
    fn = params["fn"]
    if not callable(fn):
        raise TypeError("invoke requires a callable 'fn'")
    fn(payload)
