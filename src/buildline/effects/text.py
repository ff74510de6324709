"""Leaf effects de texto: concat, replace.

concat:
- STRINGS → STRING, itens unidos por vírgula (`["a", "b"]` → `"a,b"`).
- FILES → STRING, conteúdos concatenados sem separador.

replace:
- STRING → STRING, STRINGS → STRINGS (cada item).
- `flags` segue a notação de regex do JavaScript: `g` substitui todas as
  ocorrências (sem `g`, apenas a primeira), `i`, `m` e `s` mapeiam para
  `re.IGNORECASE`, `re.MULTILINE` e `re.DOTALL`.
- A string de substituição aceita `$1`..`$99`, `$&` (match inteiro) e `$$`.
"""

from __future__ import annotations

import re
from typing import Any, Callable, Dict, List, Sequence, Tuple

from buildline.core.pipeline.context import BuildContext
from buildline.core.pipeline.transform import ParamSpec, TransformDescriptor
from buildline.core.pipeline.types import PayloadKind

from .fs import read_text


STRINGS_SEPARATOR = ","

_FLAG_MAP = {
    "i": re.IGNORECASE,
    "m": re.MULTILINE,
    "s": re.DOTALL,
}
_REPLACEMENT_TOKEN = re.compile(r"\$(\$|&|\d{1,2})")


def _concat_strings(payload: Sequence[str], params: Dict[str, Any], ctx: BuildContext) -> str:
    return STRINGS_SEPARATOR.join(payload)


def _concat_files(payload: Sequence[str], params: Dict[str, Any], ctx: BuildContext) -> str:
    return "".join(read_text(path) for path in payload)


concat = TransformDescriptor(
    name="concat",
    accepts=frozenset({PayloadKind.STRINGS, PayloadKind.FILES}),
    effect={
        PayloadKind.STRINGS: _concat_strings,
        PayloadKind.FILES: _concat_files,
    },
    output_kind=PayloadKind.STRING,
    description="Concatena strings (separadas por vírgula) ou o conteúdo dos arquivos.",
)


def parse_flags(flags: str) -> Tuple[int, bool]:
    """Converte flags estilo JS em (flags do `re`, global)."""
    re_flags = 0
    is_global = False
    for ch in flags or "":
        if ch == "g":
            is_global = True
        elif ch in _FLAG_MAP:
            re_flags |= _FLAG_MAP[ch]
        else:
            raise ValueError(f"unsupported regex flag: {ch!r}")
    return re_flags, is_global


def js_replacement(template: str) -> Callable[["re.Match[str]"], str]:
    """Função de substituição que expande `$n`, `$&` e `$$` como no JavaScript."""

    def expand(match: "re.Match[str]") -> str:
        def token(t: "re.Match[str]") -> str:
            ref = t.group(1)
            if ref == "$":
                return "$"
            if ref == "&":
                return match.group(0)
            groups = match.re.groups or 0
            idx = int(ref)
            if 1 <= idx <= groups:
                return match.group(idx) or ""
            # `$10` sem o grupo 10 vira grupo 1 seguido de "0"
            if len(ref) == 2 and 1 <= int(ref[0]) <= groups:
                return (match.group(int(ref[0])) or "") + ref[1]
            return t.group(0)

        return _REPLACEMENT_TOKEN.sub(token, template)

    return expand


def _compile(params: Dict[str, Any]) -> Tuple["re.Pattern[str]", Callable[["re.Match[str]"], str], int]:
    re_flags, is_global = parse_flags(params["flags"])
    pattern = re.compile(params["regex"], re_flags)
    return pattern, js_replacement(params["replace"]), 0 if is_global else 1


def _replace_string(payload: str, params: Dict[str, Any], ctx: BuildContext) -> str:
    pattern, repl, count = _compile(params)
    return pattern.sub(repl, payload, count=count)


def _replace_strings(payload: Sequence[str], params: Dict[str, Any], ctx: BuildContext) -> List[str]:
    pattern, repl, count = _compile(params)
    return [pattern.sub(repl, s, count=count) for s in payload]


replace = TransformDescriptor(
    name="replace",
    accepts=frozenset({PayloadKind.STRING, PayloadKind.STRINGS}),
    effect={
        PayloadKind.STRING: _replace_string,
        PayloadKind.STRINGS: _replace_strings,
    },
    output_kind=lambda task: task.kind,
    params=(
        ParamSpec("regex", required=True, types=(str,)),
        ParamSpec("replace", default="", types=(str,)),
        ParamSpec("flags", default="mg", types=(str,)),
    ),
    description="Aplica substituição por expressão regular no texto.",
)
