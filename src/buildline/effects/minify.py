"""Leaf effects de minificação: minify (JavaScript) e cssminify (CSS).

Regra de kind de saída:
- STRING → STRING
- STRINGS → STRINGS (um resultado por item)
- FILES com um único arquivo → STRING
- FILES com vários arquivos → STRINGS, na ordem do payload

A minificação em si é delegada a `rjsmin` e `rcssmin`.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Sequence

import rcssmin
import rjsmin

from buildline.core.pipeline.context import BuildContext
from buildline.core.pipeline.task import Task
from buildline.core.pipeline.transform import TransformDescriptor
from buildline.core.pipeline.types import PayloadKind

from .fs import read_text


MINIFY_KINDS = frozenset({PayloadKind.FILES, PayloadKind.STRINGS, PayloadKind.STRING})


def minified_kind(task: Task) -> PayloadKind:
    """STRING para um único texto (ou um único arquivo), STRINGS caso contrário."""
    if task.kind is PayloadKind.STRING:
        return PayloadKind.STRING
    if task.kind is PayloadKind.FILES and task.size == 1:
        return PayloadKind.STRING
    return PayloadKind.STRINGS


def _effect_table(minifier: Callable[[str], str]) -> Dict[PayloadKind, Callable[..., Any]]:
    def on_string(payload: str, params: Dict[str, Any], ctx: BuildContext) -> str:
        return minifier(payload)

    def on_strings(payload: Sequence[str], params: Dict[str, Any], ctx: BuildContext) -> List[str]:
        return [minifier(s) for s in payload]

    def on_files(payload: Sequence[str], params: Dict[str, Any], ctx: BuildContext) -> Any:
        out = [minifier(read_text(path)) for path in payload]
        return out[0] if len(out) == 1 else out

    return {
        PayloadKind.STRING: on_string,
        PayloadKind.STRINGS: on_strings,
        PayloadKind.FILES: on_files,
    }


minify = TransformDescriptor(
    name="minify",
    accepts=MINIFY_KINDS,
    effect=_effect_table(rjsmin.jsmin),
    output_kind=minified_kind,
    description="Minifica JavaScript.",
)

cssminify = TransformDescriptor(
    name="cssminify",
    accepts=MINIFY_KINDS,
    effect=_effect_table(rcssmin.cssmin),
    output_kind=minified_kind,
    description="Minifica CSS.",
)
