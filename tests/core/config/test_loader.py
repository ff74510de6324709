# tests/core/config/test_loader.py
"""
Testes do carregador de configuração (load_config).

Os testes asseguram que:
- o arquivo defaults é obrigatório
- o arquivo local é opcional
- formatos não suportados são rejeitados
- a configuração final parte sempre de DEFAULT_CONFIG

Invariantes:
    - A configuração final é sempre um dicionário
    - Nenhuma configuração parcial é retornada em caso de erro
    - Overrides locais nunca silenciam erros de defaults ausentes
"""

import json
from pathlib import Path

import pytest

try:
    from buildline.core.config.loader import load_config
    from buildline.core.config.errors import (
        DefaultsNotFoundError,
        InvalidConfigRootTypeError,
        UnsupportedConfigFormatError,
    )
except Exception as e:  # noqa: BLE001
    load_config = None
    DefaultsNotFoundError = None
    InvalidConfigRootTypeError = None
    UnsupportedConfigFormatError = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None


def _require_imports():
    """
    Garante que o loader de configuração e suas exceções tipadas estejam disponíveis.

    Falha imediatamente, com mensagem explícita, quando `loader` ou
    `errors` não podem ser importados.
    """
    if _IMPORT_ERR is not None:
        pytest.fail(
            "Missing loader/errors modules. Implement:\n"
            "- src/buildline/core/config/loader.py (load_config)\n"
            "- src/buildline/core/config/errors.py (typed exceptions)\n"
            f"Import error: {_IMPORT_ERR}"
        )


def test_missing_defaults_raises(tmp_path: Path):
    """
    Verifica que a ausência do arquivo de defaults é tratada como erro fatal.

    Invariantes:
        - A exceção utilizada é específica (`DefaultsNotFoundError`)
        - Nenhuma configuração parcial é retornada
    """
    _require_imports()
    missing = tmp_path / "defaults.yaml"
    with pytest.raises(DefaultsNotFoundError):
        load_config(defaults_path=str(missing), local_path=None)


def test_missing_local_is_ok(tmp_path: Path, project_like_config_defaults_yaml):
    """
    Verifica que a ausência do arquivo local não é tratada como erro.

    Defaults permanecem como fonte única quando o local não existe.
    """
    _require_imports()
    defaults = tmp_path / "defaults.yaml"
    defaults.write_text(project_like_config_defaults_yaml, encoding="utf-8")

    out = load_config(defaults_path=str(defaults), local_path=str(tmp_path / "local.yaml"))
    assert out["fork"]["mode"] == "thread"
    assert out["fork"]["max_workers"] == 8
    assert out["transforms"]["jslint"]["max_line_length"] == 100


def test_load_defaults_and_local(tmp_path: Path, project_like_config_defaults_yaml, project_like_config_local_yaml):
    """
    Verifica o merge defaults + local com a política de deep-merge.

    O resultado final deve refletir:
    - valores sobrescritos pelo arquivo local
    - valores preservados do arquivo defaults quando não sobrescritos
    """
    _require_imports()
    defaults = tmp_path / "defaults.yaml"
    local = tmp_path / "local.yaml"
    defaults.write_text(project_like_config_defaults_yaml, encoding="utf-8")
    local.write_text(project_like_config_local_yaml, encoding="utf-8")

    out = load_config(defaults_path=str(defaults), local_path=str(local))
    assert out["fork"]["mode"] == "inline"
    assert out["fork"]["max_workers"] == 8
    assert out["transforms"]["jslint"] == {"max_line_length": 100, "allow_tabs": True}
    assert out["transforms"]["replace"] == {"flags": "mg"}


def test_builtin_defaults_fill_missing_sections(tmp_path: Path):
    """Um arquivo de defaults vazio resolve para DEFAULT_CONFIG."""
    _require_imports()
    defaults = tmp_path / "defaults.yml"
    defaults.write_text("", encoding="utf-8")

    out = load_config(defaults_path=defaults)
    assert out["engine"]["strict_completion"] is True
    assert out["fork"] == {"mode": "thread", "max_workers": 4}
    assert out["transforms"] == {}


def test_json_defaults_supported(tmp_path: Path):
    _require_imports()
    defaults = tmp_path / "defaults.json"
    defaults.write_text(json.dumps({"engine": {"strict_completion": False}}), encoding="utf-8")

    out = load_config(defaults_path=defaults)
    assert out["engine"]["strict_completion"] is False


def test_invalid_root_type_raises(tmp_path: Path):
    """
    Verifica que o loader rejeita configurações cuja raiz não é um dicionário.

    A validação ocorre imediatamente após o parse do arquivo.
    """
    _require_imports()
    defaults = tmp_path / "defaults.yaml"
    defaults.write_text("- just\n- a\n- list\n", encoding="utf-8")
    with pytest.raises(InvalidConfigRootTypeError):
        load_config(defaults_path=str(defaults), local_path=None)


def test_unsupported_extension_raises(tmp_path: Path):
    """Arquivos com extensão fora de .yaml/.yml/.json são rejeitados antes do parse."""
    _require_imports()
    defaults = tmp_path / "defaults.toml"
    defaults.write_text("fork = { mode = 'inline' }\n", encoding="utf-8")
    with pytest.raises(UnsupportedConfigFormatError):
        load_config(defaults_path=str(defaults), local_path=None)
