"""
Leaf effects de lint: jslint e csslint.

Ambos são transforms terminais: não alteram a Task (pass-through) e
apenas reportam findings. Cada finding é:
    - enviado ao reporter do contexto (`source` = arquivo ou "buildline")
    - registrado como warning em `ctx.warnings[<transform>]`

Os checks são heurísticas por linha, propositalmente simples. Não há
parser de JavaScript ou CSS; um lint sem findings não garante código
válido.

Regras jslint:
    - linha maior que `max_line_length`
    - espaço em branco no fim da linha
    - tabulação (a menos que `allow_tabs`)
    - `==` / `!=` em vez de `===` / `!==`
    - `debugger`
    - `eval(`

Regras csslint:
    - regra vazia (`{}`)
    - `!important`
    - zero com unidade (`0px`, `0em`, ...)
    - espaço em branco no fim da linha
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Sequence, Tuple

from buildline.core.pipeline.context import BuildContext
from buildline.core.pipeline.transform import ParamSpec, TransformDescriptor
from buildline.core.pipeline.types import PayloadKind

from .fs import read_text


INLINE_SOURCE = "buildline"

_LOOSE_EQUALITY = re.compile(r"(?<![=!<>])(==|!=)(?!=)")
_DEBUGGER = re.compile(r"\bdebugger\b")
_EVAL = re.compile(r"\beval\s*\(")

_EMPTY_RULE = re.compile(r"\{\s*\}")
_IMPORTANT = re.compile(r"!\s*important", re.IGNORECASE)
_ZERO_WITH_UNIT = re.compile(r"(?<![\d.#\w-])0(px|em|rem|ex|pt|pc|cm|mm|in|vh|vw|%)\b")


@dataclass(frozen=True)
class Finding:
    source: str
    line: int
    message: str

    def format(self) -> str:
        return f"{self.source}:{self.line}: {self.message}"


Checker = Callable[[str, str, Dict[str, Any]], List[Finding]]


def check_js(text: str, source: str, params: Dict[str, Any]) -> List[Finding]:
    findings: List[Finding] = []
    max_len = params.get("max_line_length") or 0
    allow_tabs = bool(params.get("allow_tabs"))

    for lineno, line in enumerate(text.splitlines(), start=1):
        if max_len and len(line) > max_len:
            findings.append(Finding(source, lineno, f"line too long ({len(line)} > {max_len})"))
        if line != line.rstrip():
            findings.append(Finding(source, lineno, "trailing whitespace"))
        if not allow_tabs and "\t" in line:
            findings.append(Finding(source, lineno, "tab character"))
        for m in _LOOSE_EQUALITY.finditer(line):
            findings.append(Finding(source, lineno, f"use '{m.group(1)}=' instead of '{m.group(1)}'"))
        if _DEBUGGER.search(line):
            findings.append(Finding(source, lineno, "debugger statement"))
        if _EVAL.search(line):
            findings.append(Finding(source, lineno, "eval is evil"))
    return findings


def check_css(text: str, source: str, params: Dict[str, Any]) -> List[Finding]:
    findings: List[Finding] = []
    for lineno, line in enumerate(text.splitlines(), start=1):
        if _EMPTY_RULE.search(line):
            findings.append(Finding(source, lineno, "empty rule"))
        if _IMPORTANT.search(line):
            findings.append(Finding(source, lineno, "avoid !important"))
        for m in _ZERO_WITH_UNIT.finditer(line):
            findings.append(Finding(source, lineno, f"unit not needed for zero value (0{m.group(1)})"))
        if line != line.rstrip():
            findings.append(Finding(source, lineno, "trailing whitespace"))
    return findings


def _emit(name: str, findings: Iterable[Finding], ctx: BuildContext) -> int:
    count = 0
    for f in findings:
        ctx.reporter.report(source=f.source, message=f.format(), transform=name, line=f.line)
        ctx.add_warning(source=name, message=f.format())
        count += 1
    return count


def _lint_table(name: str, checker: Checker) -> Dict[PayloadKind, Callable[..., Any]]:
    def run(units: Sequence[Tuple[str, str]], params: Dict[str, Any], ctx: BuildContext) -> None:
        total = 0
        for source, text in units:
            total += _emit(name, checker(text, source, params), ctx)
        ctx.log(source=name, level="info", message="lint finished", units=len(units), findings=total)

    def on_files(payload: Sequence[str], params: Dict[str, Any], ctx: BuildContext) -> None:
        run([(path, read_text(path)) for path in payload], params, ctx)

    def on_strings(payload: Sequence[str], params: Dict[str, Any], ctx: BuildContext) -> None:
        run([(INLINE_SOURCE, s) for s in payload], params, ctx)

    def on_string(payload: str, params: Dict[str, Any], ctx: BuildContext) -> None:
        run([(INLINE_SOURCE, payload)], params, ctx)

    return {
        PayloadKind.FILES: on_files,
        PayloadKind.STRINGS: on_strings,
        PayloadKind.STRING: on_string,
    }


LINT_KINDS = frozenset({PayloadKind.FILES, PayloadKind.STRINGS, PayloadKind.STRING})

jslint = TransformDescriptor(
    name="jslint",
    accepts=LINT_KINDS,
    effect=_lint_table("jslint", check_js),
    params=(
        ParamSpec("max_line_length", default=120, types=(int,)),
        ParamSpec("allow_tabs", default=False, types=(bool,)),
    ),
    terminal=True,
    description="Reporta problemas comuns em JavaScript.",
)

csslint = TransformDescriptor(
    name="csslint",
    accepts=LINT_KINDS,
    effect=_lint_table("csslint", check_css),
    terminal=True,
    description="Reporta problemas comuns em CSS.",
)
