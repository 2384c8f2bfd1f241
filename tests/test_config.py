import logging

import pytest

from anonvp.config import AnonVPConfig, ConfigValue, load_config
from anonvp.errors import ConfigError, ConfigValidationError


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in ("ANONVP_LOG_LEVEL", "ANONVP_PRETTY", "ANONVP_INDENT", "ANONVP_CANONICAL", "ANONVP_CONFIG"):
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    cfg = AnonVPConfig()
    assert cfg.to_dict() == {"log_level": "warning", "pretty": False, "indent": 2, "canonical": False}
    assert cfg.validate() == []
    assert cfg.logging_level() == logging.WARNING


def test_yaml_file_overrides_defaults(tmp_path):
    p = tmp_path / "anonvp.yaml"
    p.write_text("log_level: DEBUG\npretty: true\nindent: 4\n", encoding="utf-8")

    cfg = AnonVPConfig.from_yaml(p)
    assert cfg.pretty.get() is True
    assert cfg.indent.get() == 4
    assert cfg.logging_level() == logging.DEBUG


def test_env_overrides_file(tmp_path, monkeypatch):
    p = tmp_path / "anonvp.yaml"
    p.write_text("indent: 4\npretty: false\n", encoding="utf-8")
    monkeypatch.setenv("ANONVP_INDENT", "6")
    monkeypatch.setenv("ANONVP_PRETTY", "yes")

    cfg = AnonVPConfig.from_yaml(p)
    assert cfg.indent.get() == 6
    assert cfg.pretty.get() is True


def test_load_config_uses_env_path(tmp_path, monkeypatch):
    p = tmp_path / "cfg.yaml"
    p.write_text("canonical: true\n", encoding="utf-8")
    monkeypatch.setenv("ANONVP_CONFIG", str(p))
    assert load_config().canonical.get() is True


def test_empty_yaml_gives_defaults(tmp_path):
    p = tmp_path / "empty.yaml"
    p.write_text("", encoding="utf-8")
    assert AnonVPConfig.from_yaml(p).to_dict() == AnonVPConfig().to_dict()


def test_missing_file(tmp_path):
    with pytest.raises(ConfigError):
        AnonVPConfig.from_yaml(tmp_path / "nope.yaml")


def test_unknown_key_rejected(tmp_path):
    p = tmp_path / "bad.yaml"
    p.write_text("base_context: https://example.org\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        AnonVPConfig.from_yaml(p)


def test_non_mapping_rejected(tmp_path):
    p = tmp_path / "bad.yaml"
    p.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        AnonVPConfig.from_yaml(p)


@pytest.mark.parametrize("key,value", [("indent", 9), ("indent", True), ("log_level", "loud"), ("pretty", "yes")])
def test_invalid_values_rejected(key, value):
    with pytest.raises(ConfigValidationError):
        AnonVPConfig().apply({key: value})


def test_invalid_env_reported_by_validate(monkeypatch):
    monkeypatch.setenv("ANONVP_INDENT", "wide")
    monkeypatch.setenv("ANONVP_LOG_LEVEL", "chatty")
    errors = AnonVPConfig().validate()
    assert len(errors) == 2
    assert errors[0].startswith("log_level:")
    assert errors[1].startswith("indent:")


def test_config_value_coercion(monkeypatch):
    monkeypatch.setenv("X_FLAG", "off")
    assert ConfigValue(default=True, env_var="X_FLAG").get() is False


def test_to_yaml_round_trip():
    import yaml

    assert yaml.safe_load(AnonVPConfig().to_yaml()) == AnonVPConfig().to_dict()
