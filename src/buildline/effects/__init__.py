"""
Leaf effects padrão do buildline.

Cada módulo define um ou mais TransformDescriptor; `default_registry()`
os registra todos, na ordem abaixo.

    fs          → files, copy, write
    text        → concat, replace
    minify      → minify, cssminify
    template    → template
    lint        → jslint, csslint
    passthrough → log, invoke
"""

from typing import List, Optional

from buildline.core.pipeline.registry import TransformRegistry
from buildline.core.pipeline.transform import TransformDescriptor

from .fs import copy, files, write
from .lint import csslint, jslint
from .minify import cssminify, minify
from .passthrough import invoke, log
from .template import template
from .text import concat, replace


DEFAULT_TRANSFORMS: List[TransformDescriptor] = [
    files,
    copy,
    write,
    concat,
    replace,
    minify,
    cssminify,
    template,
    jslint,
    csslint,
    log,
    invoke,
]


def register_default_transforms(registry: TransformRegistry) -> TransformRegistry:
    for descriptor in DEFAULT_TRANSFORMS:
        registry.add(descriptor)
    return registry


def default_registry(registry: Optional[TransformRegistry] = None) -> TransformRegistry:
    """Registry com todos os transforms padrão (novo, se nenhum for informado)."""
    return register_default_transforms(registry if registry is not None else TransformRegistry())


__all__ = [
    "DEFAULT_TRANSFORMS",
    "default_registry",
    "register_default_transforms",
    "files",
    "copy",
    "write",
    "concat",
    "replace",
    "minify",
    "cssminify",
    "template",
    "jslint",
    "csslint",
    "log",
    "invoke",
]
