# tests/effects/test_text_effects.py
"""
Testes dos leaf effects de texto: concat e replace.

concat:
    - STRINGS → STRING unida por vírgula
    - FILES → STRING com o conteúdo dos arquivos, sem separador

replace:
    - flags no estilo JavaScript (`g`, `i`, `m`, `s`)
    - substituição com `$1`, `$&` e `$$`
"""

import pytest

try:
    from buildline.core.exceptions import LeafEffectFailure
    from buildline.core.pipeline.task import create_task
    from buildline.core.pipeline.types import PayloadKind
    from buildline.effects.text import js_replacement, parse_flags
except Exception as e:  # noqa: BLE001
    create_task = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None


def _require_imports():
    if _IMPORT_ERR is not None:
        pytest.fail(
            "Missing text effects. Implement:\n"
            "- src/buildline/effects/text.py (concat, replace)\n"
            f"Import error: {_IMPORT_ERR}"
        )


def test_concat_strings_with_comma(engine):
    _require_imports()
    out = engine.apply(create_task(PayloadKind.STRINGS, ["a", "b"]), "concat")
    assert out.kind is PayloadKind.STRING
    assert out.payload == "a,b"


def test_concat_empty_strings(engine):
    _require_imports()
    out = engine.apply(create_task(PayloadKind.STRINGS, []), "concat")
    assert out.payload == ""


def test_concat_files_joins_contents(engine, tmp_path):
    """
    Verifica que FILES concatenado produz o conteúdo dos arquivos.

    A ordem do payload é preservada e nenhum separador é inserido.
    """
    _require_imports()
    a = tmp_path / "a.js"
    b = tmp_path / "b.js"
    a.write_text("var a = 1;\n", encoding="utf-8")
    b.write_text("var b = 2;\n", encoding="utf-8")

    out = engine.apply(create_task(PayloadKind.FILES, [str(b), str(a)]), "concat")
    assert out.payload == "var b = 2;\nvar a = 1;\n"


def test_replace_global_by_default(engine):
    _require_imports()
    out = engine.apply(create_task(PayloadKind.STRING, "a-b-c"), "replace", {"regex": "-", "replace": "+"})
    assert out.payload == "a+b+c"


def test_replace_without_global_flag_replaces_first(engine):
    _require_imports()
    out = engine.apply(
        create_task(PayloadKind.STRING, "a-b-c"),
        "replace",
        {"regex": "-", "replace": "+", "flags": ""},
    )
    assert out.payload == "a+b-c"


def test_replace_on_strings_keeps_kind(engine):
    _require_imports()
    out = engine.apply(
        create_task(PayloadKind.STRINGS, ["Foo", "foo"]),
        "replace",
        {"regex": "FOO", "replace": "bar", "flags": "gi"},
    )
    assert out.kind is PayloadKind.STRINGS
    assert out.payload == ("bar", "bar")


def test_replace_with_group_references(engine):
    """`$1`, `$&` e `$$` seguem a semântica do JavaScript."""
    _require_imports()
    out = engine.apply(
        create_task(PayloadKind.STRING, "version: 1.2"),
        "replace",
        {"regex": r"(\d+)\.(\d+)", "replace": "$2.$1 ($&) $$"},
    )
    assert out.payload == "version: 2.1 (1.2) $"


def test_replace_multiline_anchor(engine):
    _require_imports()
    out = engine.apply(
        create_task(PayloadKind.STRING, "// one\ncode\n// two"),
        "replace",
        {"regex": r"^//.*$", "replace": ""},
    )
    assert out.payload == "\ncode\n"


def test_invalid_flag_is_leaf_failure(engine):
    _require_imports()
    with pytest.raises(LeafEffectFailure) as exc:
        engine.apply(create_task(PayloadKind.STRING, "x"), "replace", {"regex": "x", "flags": "y"})
    assert exc.value.details["exc_type"] == "ValueError"


def test_parse_flags():
    _require_imports()
    import re

    assert parse_flags("") == (0, False)
    assert parse_flags("gim") == (re.IGNORECASE | re.MULTILINE, True)


def test_js_replacement_unknown_group_is_literal():
    _require_imports()
    import re

    expand = js_replacement("[$3]")
    assert re.sub("(a)", expand, "a") == "[$3]"


def test_js_replacement_two_digits_fall_back_to_one_group():
    """`$10` com um único grupo expande o grupo 1 seguido de "0"."""
    _require_imports()
    import re

    assert re.sub("(a)", js_replacement("$10"), "a") == "a0"
    assert re.sub("(a)", js_replacement("$01"), "a") == "a"
    assert re.sub("(a)", js_replacement("$20"), "a") == "$20"
