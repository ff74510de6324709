# tests/core/engine/test_engine_apply.py
"""
Testes de `Engine.apply` e `Engine.chain`.

Este módulo valida o contrato de execução de um único passo
Task → Transform → Task:

- a legalidade (nome, kind, parâmetros) é verificada antes de qualquer
  leaf effect
- o kind de saída segue a regra declarada pelo transform
- transforms terminais devolvem a Task de entrada (pass-through)
- falhas do leaf effect são encapsuladas em LeafEffectFailure

Decisões arquiteturais:
    - O Engine é síncrono; cada passo termina antes do seguinte
    - Nenhum retry, nenhuma recuperação parcial

Invariantes:
    - Um kind incompatível nunca produz efeito colateral
    - `chain` equivale a aplicações aninhadas de `apply`
"""

import pytest

try:
    from buildline.core.engine.engine import Engine
    from buildline.core.exceptions import (
        IncompatibleKind,
        InvalidPayloadShape,
        LeafEffectFailure,
        UnknownTransform,
    )
    from buildline.core.pipeline.registry import TransformRegistry
    from buildline.core.pipeline.task import create_task
    from buildline.core.pipeline.transform import TransformDescriptor
    from buildline.core.pipeline.types import PayloadKind
except Exception as e:  # noqa: BLE001
    Engine = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None


def _require_imports():
    """
    Garante que o Engine e os contratos de Task/Transform estejam disponíveis.

    Decisões arquiteturais:
        - Falha antecipada e explícita quando contratos do Engine estão ausentes
        - Evita falhas indiretas ou mensagens pouco informativas nos testes
    """
    if _IMPORT_ERR is not None:
        pytest.fail(
            "Missing Engine contracts. Implement:\n"
            "- src/buildline/core/engine/engine.py (Engine.apply, Engine.chain)\n"
            f"Import error: {_IMPORT_ERR}"
        )


def _engine_with(ctx, *descriptors):
    reg = TransformRegistry()
    for d in descriptors:
        reg.add(d)
    return Engine(registry=reg, ctx=ctx)


def test_concat_strings(engine):
    """`["a", "b"]` concatenado produz a STRING `"a,b"`."""
    _require_imports()
    out = engine.apply(create_task(PayloadKind.STRINGS, ["a", "b"]), "concat")
    assert out.kind is PayloadKind.STRING
    assert out.payload == "a,b"


def test_incompatible_kind_has_no_side_effects(ctx, counting_transform):
    """
    Verifica que um kind incompatível é recusado antes do leaf effect.

    Invariantes:
        - O leaf effect nunca é chamado
        - Nenhum evento "transform started" é registrado
    """
    _require_imports()
    descriptor, calls = counting_transform(name="only_string", accepts=(PayloadKind.STRING,))
    eng = _engine_with(ctx, descriptor)

    with pytest.raises(IncompatibleKind, match="only_string does not support the FILES payload kind"):
        eng.apply(create_task(PayloadKind.FILES, ["a.js"]), "only_string")

    assert calls == []
    assert ctx.events_for("only_string") == []


def test_replace_on_files_is_rejected(engine, tmp_path):
    _require_imports()
    target = tmp_path / "a.js"
    target.write_text("var a = 1;", encoding="utf-8")

    with pytest.raises(IncompatibleKind):
        engine.apply(create_task(PayloadKind.FILES, [str(target)]), "replace", {"regex": "a"})
    assert target.read_text(encoding="utf-8") == "var a = 1;"


def test_unknown_transform(engine):
    _require_imports()
    with pytest.raises(UnknownTransform):
        engine.apply(create_task(PayloadKind.STRING, "x"), "uglify")


def test_apply_requires_task(engine):
    _require_imports()
    with pytest.raises(TypeError):
        engine.apply("not a task", "concat")  # type: ignore[arg-type]


def test_terminal_transform_is_pass_through(ctx, counting_transform):
    """
    Verifica que transforms terminais devolvem a própria Task de entrada.

    Aplicar um terminal duas vezes produz a mesma Task e o leaf effect é
    executado uma vez por aplicação.
    """
    _require_imports()
    descriptor, calls = counting_transform(name="peek", accepts=(PayloadKind.STRINGS,), terminal=True)
    eng = _engine_with(ctx, descriptor)
    task = create_task(PayloadKind.STRINGS, ["a", "b"])

    once = eng.apply(task, "peek")
    twice = eng.apply(once, "peek")

    assert once is task
    assert twice is task
    assert calls == [("a", "b"), ("a", "b")]


def test_leaf_effect_failure_is_wrapped(ctx):
    """
    Verifica que exceções do leaf effect são encapsuladas em LeafEffectFailure.

    Invariantes:
        - A causa original fica em `__cause__`
        - Os detalhes nomeiam o transform e o tipo da exceção original
        - Um evento de erro é registrado no BuildContext
    """
    _require_imports()

    def boom(payload, params, ctx):
        raise OSError("disk full")

    eng = _engine_with(
        ctx,
        TransformDescriptor(
            name="boom",
            accepts=frozenset({PayloadKind.STRING}),
            effect=boom,
            output_kind=PayloadKind.STRING,
        ),
    )

    with pytest.raises(LeafEffectFailure) as exc:
        eng.apply(create_task(PayloadKind.STRING, "x"), "boom")

    assert isinstance(exc.value.__cause__, OSError)
    assert exc.value.details == {"transform": "boom", "exc_type": "OSError", "exc_message": "disk full"}
    assert [e["message"] for e in ctx.events_for("boom")] == ["transform started", "transform failed"]


def test_output_shape_is_validated(ctx):
    """Um leaf effect que devolve payload fora da forma declarada falha com InvalidPayloadShape."""
    _require_imports()
    eng = _engine_with(
        ctx,
        TransformDescriptor(
            name="liar",
            accepts=frozenset({PayloadKind.STRING}),
            effect=lambda payload, params, ctx: 42,
            output_kind=PayloadKind.STRING,
        ),
    )
    with pytest.raises(InvalidPayloadShape):
        eng.apply(create_task(PayloadKind.STRING, "x"), "liar")


def test_chain_equals_nested_apply(engine):
    """
    Verifica que `chain` equivale a aplicações aninhadas de `apply`.

    Nenhum estado é mantido entre os passos além da Task retornada.
    """
    _require_imports()
    task = create_task(PayloadKind.STRINGS, ["foo", "bar"])
    steps = [("replace", {"regex": "o", "replace": "0"}), "concat"]

    chained = engine.chain(task, steps)
    nested = engine.apply(engine.apply(task, "replace", {"regex": "o", "replace": "0"}), "concat")

    assert chained == nested
    assert chained.payload == "f00,bar"


def test_apply_logs_start_and_done(engine, ctx):
    _require_imports()
    engine.apply(create_task(PayloadKind.STRINGS, ["a"]), "concat")
    events = ctx.events_for("concat")
    assert [e["message"] for e in events] == ["transform started", "transform done"]
    assert events[0]["kind"] == "STRINGS"
    assert events[1]["kind"] == "STRING"
