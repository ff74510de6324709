# tests/conftest.py
"""
Fixtures compartilhados para testes do buildline.

Este módulo define fixtures reutilizáveis que fornecem:
- configurações mínimas e determinísticas
- contexto de build controlado (BuildContext com run_id fixo)
- registry e engine com os transforms padrão
- um transform de contagem para verificar ausência de efeitos colaterais

Decisões arquiteturais:
    - Fixtures são mantidas simples e explícitas
    - Imports do buildline são realizados de forma lazy para
      melhorar a clareza de erros durante falhas
    - Fork em modo `inline` por padrão, para testes determinísticos;
      testes de concorrência real pedem `thread` explicitamente

Invariantes:
    - Nenhuma fixture realiza I/O fora de `tmp_path`
    - Nenhuma fixture executa transforms

Limites explícitos:
    - Não substituir testes de integração
    - Não conter lógica de domínio
"""

import pytest


# =====================================================
# Config fixtures
# =====================================================

@pytest.fixture
def project_like_config_defaults_yaml() -> str:
    """
    YAML de defaults semelhante ao `buildline.defaults.yaml` de um projeto.

    Usado para validar leitura de YAML e o merge com overrides locais.
    """
    return (
        "engine:\n"
        "  strict_completion: true\n"
        "fork:\n"
        "  mode: thread\n"
        "  max_workers: 8\n"
        "transforms:\n"
        "  replace:\n"
        "    flags: mg\n"
        "  jslint:\n"
        "    max_line_length: 100\n"
    )


@pytest.fixture
def project_like_config_local_yaml() -> str:
    """YAML local que sobrescreve apenas parte dos defaults."""
    return (
        "fork:\n"
        "  mode: inline\n"
        "transforms:\n"
        "  jslint:\n"
        "    allow_tabs: true\n"
    )


@pytest.fixture
def inline_config():
    """Configuração mínima com fork inline (determinístico)."""
    return {
        "engine": {"strict_completion": True},
        "fork": {"mode": "inline", "max_workers": 1},
        "transforms": {},
    }


# =====================================================
# Context / Registry / Engine fixtures
# =====================================================

@pytest.fixture
def reporter():
    from buildline.core.pipeline.context import MemoryReporter

    return MemoryReporter()


@pytest.fixture
def ctx(inline_config, reporter):
    """
    BuildContext determinístico para testes do core.

    - run_id fixo
    - fork inline
    - MemoryReporter inspecionável via fixture `reporter`
    """
    from buildline.core.pipeline.context import new_context

    return new_context(config=inline_config, reporter=reporter, run_id="build-test")


@pytest.fixture
def registry():
    from buildline.effects import default_registry

    return default_registry()


@pytest.fixture
def engine(registry, ctx):
    from buildline.core.engine.engine import Engine

    return Engine(registry=registry, ctx=ctx)


@pytest.fixture
def counting_transform():
    """
    Fábrica de transforms que contam quantas vezes seu leaf effect executou.

    Retorna `(descriptor, calls)`, onde `calls` é a lista de payloads
    recebidos pelo leaf effect.
    """
    from buildline.core.pipeline.transform import TransformDescriptor
    from buildline.core.pipeline.types import PayloadKind

    def make(name="count", accepts=(PayloadKind.STRING,), output_kind=PayloadKind.STRING, terminal=False, params=()):
        calls = []

        def effect(payload, params, ctx):
            calls.append(payload)
            return None if terminal else payload

        descriptor = TransformDescriptor(
            name=name,
            accepts=frozenset(accepts),
            effect=effect,
            output_kind=None if terminal else output_kind,
            params=tuple(params),
            terminal=terminal,
        )
        return descriptor, calls

    return make
