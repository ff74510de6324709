"""Leaf effect `template`: envolve uma STRING em um template mustache.

O texto de entrada é exposto ao template na variável `var` (padrão
`code`), ao lado das chaves de `model`. O `model` do chamador nunca é
alterado; o contexto de renderização é uma cópia rasa.

Use `{{{code}}}` no template para inserir o texto sem escape HTML.
"""

from __future__ import annotations

from typing import Any, Dict

import chevron

from buildline.core.pipeline.context import BuildContext
from buildline.core.pipeline.transform import ParamSpec, transform
from buildline.core.pipeline.types import PayloadKind

from .fs import read_text


@transform(
    "template",
    accepts=[PayloadKind.STRING],
    output_kind=PayloadKind.STRING,
    params=[
        ParamSpec("template", required=True, types=(str,)),
        ParamSpec("model", default=None, types=(dict,)),
        ParamSpec("var", default="code", types=(str,)),
    ],
)
def template(payload: str, params: Dict[str, Any], ctx: BuildContext) -> str:
    """Renderiza o arquivo de template com o texto de entrada."""
    source = read_text(params["template"])
    view = dict(params["model"] or {})
    view[params["var"]] = payload
    return chevron.render(source, view)
