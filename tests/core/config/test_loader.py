# tests/core/config/test_loader.py
"""
Testes do carregador de configuração (load_config).

Os testes asseguram que:
- o arquivo defaults é obrigatório
- o arquivo local é opcional e tem prioridade quando existe
- formatos não suportados e raízes não-dict são rejeitados
- o arquivo de defaults versionado no repositório é válido
"""

import json
from pathlib import Path

import pytest

try:
    from crm_pipeline.core.config.loader import load_config
    from crm_pipeline.core.config.errors import (
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
    """Falha explicitamente quando o loader ou suas exceções não podem ser importados."""
    if _IMPORT_ERR is not None:
        pytest.fail(
            "Missing config loader modules. Implement:\n"
            "- src/crm_pipeline/core/config/loader.py (load_config)\n"
            "- src/crm_pipeline/core/config/errors.py\n"
            f"Import error: {_IMPORT_ERR}"
        )


def test_defaults_required(tmp_path: Path):
    _require_imports()
    with pytest.raises(DefaultsNotFoundError):
        load_config(defaults_path=str(tmp_path / "missing.yaml"))


def test_local_optional(tmp_path: Path, config_defaults_yaml: str):
    _require_imports()
    defaults = tmp_path / "pipeline.defaults.yaml"
    defaults.write_text(config_defaults_yaml, encoding="utf-8")

    cfg = load_config(defaults_path=defaults, local_path=tmp_path / "pipeline.local.yaml")

    assert cfg["persistence"]["chunk_size"] == 50
    assert cfg["pipeline"]["statuses"] == ["1º Contato", "Orçamento", "Negociação"]


def test_local_overrides_defaults(tmp_path: Path, config_defaults_yaml: str, config_local_yaml: str):
    _require_imports()
    defaults = tmp_path / "pipeline.defaults.yaml"
    local = tmp_path / "pipeline.local.yaml"
    defaults.write_text(config_defaults_yaml, encoding="utf-8")
    local.write_text(config_local_yaml, encoding="utf-8")

    cfg = load_config(defaults_path=str(defaults), local_path=str(local))

    assert cfg["persistence"]["chunk_size"] == 10
    assert cfg["persistence"]["conflict_key"] == "id"
    # listas são sobrescritas por inteiro
    assert cfg["pipeline"]["statuses"] == ["Orçamento", "Confirmado"]


def test_json_defaults_supported(tmp_path: Path):
    _require_imports()
    defaults = tmp_path / "pipeline.defaults.json"
    defaults.write_text(json.dumps({"persistence": {"chunk_size": 25}}), encoding="utf-8")

    cfg = load_config(defaults_path=defaults)

    assert cfg == {"persistence": {"chunk_size": 25}}


def test_empty_yaml_is_empty_dict(tmp_path: Path):
    _require_imports()
    defaults = tmp_path / "empty.yaml"
    defaults.write_text("", encoding="utf-8")

    assert load_config(defaults_path=defaults) == {}


def test_unsupported_format(tmp_path: Path):
    _require_imports()
    defaults = tmp_path / "pipeline.toml"
    defaults.write_text("[persistence]\nchunk_size = 50\n", encoding="utf-8")
    with pytest.raises(UnsupportedConfigFormatError):
        load_config(defaults_path=defaults)


def test_root_must_be_dict(tmp_path: Path):
    _require_imports()
    defaults = tmp_path / "pipeline.defaults.yaml"
    defaults.write_text("- 1\n- 2\n", encoding="utf-8")
    with pytest.raises(InvalidConfigRootTypeError):
        load_config(defaults_path=defaults)


def test_repo_defaults_file_loads(repo_defaults_path: Path):
    _require_imports()
    cfg = load_config(defaults_path=repo_defaults_path)

    assert cfg["persistence"]["chunk_size"] == 50
    assert cfg["persistence"]["strip_fields"] == ["created_at", "updated_at"]
    assert cfg["pipeline"]["statuses"][0] == "1º Contato"
    assert cfg["pipeline"]["statuses"][-1] == "Cancelado"
