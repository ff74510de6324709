"""Leaf effects de filesystem: files, copy, write.

Responsabilidades:
- `files`: produzir uma Task FILES a partir de nomes, caminhos e globs.
- `copy`: copiar os arquivos da Task para um destino.
- `write`: gravar uma Task STRING em disco.

Decisões:
- `files` ignora o payload de entrada; ele é o ponto de entrada típico
  de um build e por isso aceita qualquer kind.
- `copy` com um único arquivo copia arquivo → arquivo (`dest` é o nome
  final); com vários arquivos, `dest` é um diretório e cada entrada é
  copiada para `dest/<caminho de entrada>`. Caminhos absolutos perdem a raiz;
  entradas com `..` são rejeitadas antes de qualquer cópia, para que
  nada seja gravado fora de `dest`. O kind de saída é sempre
  FILES, com um caminho por entrada.
- Todos os arquivos são lidos e escritos em UTF-8.
"""

from __future__ import annotations

import glob
import os
import shutil
from pathlib import Path
from typing import Any, Dict, List, Sequence

from buildline.core.pipeline.context import BuildContext
from buildline.core.pipeline.transform import ParamSpec, transform
from buildline.core.pipeline.types import PayloadKind


ALL_KINDS = (PayloadKind.FILES, PayloadKind.STRINGS, PayloadKind.STRING)

_GLOB_CHARS = ("*", "?", "[")


def read_text(path: str) -> str:
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


def _is_pattern(entry: str) -> bool:
    return any(ch in entry for ch in _GLOB_CHARS)


def expand_filespec(filespec: Sequence[str]) -> List[str]:
    """Expande globs preservando a ordem da filespec e removendo repetidos."""
    out: List[str] = []
    seen = set()
    for entry in filespec:
        matches = sorted(glob.glob(entry, recursive=True)) if _is_pattern(entry) else [entry]
        for m in matches:
            if m not in seen:
                seen.add(m)
                out.append(m)
    return out


@transform(
    "files",
    accepts=ALL_KINDS,
    output_kind=PayloadKind.FILES,
    params=[ParamSpec("filespec", required=True, types=(list, tuple))],
)
def files(payload: Any, params: Dict[str, Any], ctx: BuildContext) -> List[str]:
    """Gera a lista de arquivos a partir de nomes, caminhos relativos e globs."""
    filespec = params["filespec"]
    if not all(isinstance(e, str) for e in filespec):
        raise TypeError("filespec entries must be strings")

    resolved = expand_filespec(filespec)
    unmatched = [e for e in filespec if _is_pattern(e) and not glob.glob(e, recursive=True)]
    for pattern in unmatched:
        ctx.add_warning(source="files", message=f"pattern matched no files: {pattern}")
    return resolved


def _target_in_dir(dest: str, src: str) -> str:
    rel = Path(src)
    if rel.is_absolute():
        rel = rel.relative_to(rel.anchor)
    if ".." in rel.parts:
        raise ValueError(f"cannot copy {src!r} into {dest!r}: path escapes the destination")
    return os.path.join(dest, str(rel))


def _copy_file(src: str, target: str) -> None:
    parent = os.path.dirname(target)
    if parent:
        os.makedirs(parent, exist_ok=True)
    shutil.copyfile(src, target)


@transform(
    "copy",
    accepts=[PayloadKind.FILES],
    output_kind=PayloadKind.FILES,
    params=[ParamSpec("dest", required=True, types=(str,))],
)
def copy(payload: Sequence[str], params: Dict[str, Any], ctx: BuildContext) -> List[str]:
    """Copia os arquivos de entrada para `dest`."""
    dest: str = params["dest"]

    if len(payload) == 1:
        _copy_file(payload[0], dest)
        return [dest]

    dest_dir = dest.rstrip("/\\") or dest
    copied = [_target_in_dir(dest_dir, src) for src in payload]
    for src, target in zip(payload, copied):
        _copy_file(src, target)
    return copied


@transform(
    "write",
    accepts=[PayloadKind.STRING],
    output_kind=PayloadKind.FILES,
    params=[ParamSpec("filename", required=True, types=(str,))],
)
def write(payload: str, params: Dict[str, Any], ctx: BuildContext) -> List[str]:
    """Grava o texto em `filename` e produz FILES com esse único caminho."""
    filename: str = params["filename"]
    parent = os.path.dirname(filename)
    if parent:
        os.makedirs(parent, exist_ok=True)
    with open(filename, "w", encoding="utf-8") as f:
        f.write(payload)
    return [filename]
