import json
from pathlib import Path

import pytest
import yaml

from pseudocode_converter.cli import validate_config
from pseudocode_converter.config import Config, ConfigManager, GenerationConfig
from pseudocode_converter.exceptions import ConfigurationError


def test_validate_config_valid_strict_ok(config_fixture):
    path = config_fixture("valid_config.yaml")
    exit_code, result = validate_config(path, lenient=False)

    if exit_code != 0:
        raise AssertionError(f"Expected strict validation to pass, got {exit_code} with {result}")
    assert isinstance(result, dict)
    if result.get("errors") != []:
        raise AssertionError
    assert isinstance(result.get("warnings"), list)
    if result.get("path") != path:
        raise AssertionError


def test_validate_config_invalid_strict_errors(config_fixture):
    path = config_fixture("invalid_config.yaml")
    exit_code, result = validate_config(path, lenient=False)

    if exit_code != 1:
        raise AssertionError("Strict mode should return nonzero exit on invalid config")
    errors = result.get("errors", [])
    if len(errors) != 5:
        raise AssertionError(errors)
    assert any("default_target" in e for e in errors)
    assert any("indent_size" in e for e in errors)
    assert result.get("warnings") == []


def test_validate_config_lenient_collects_warnings(config_fixture):
    path = config_fixture("invalid_config.yaml")
    exit_code, result = validate_config(path, lenient=True)

    if exit_code != 0:
        raise AssertionError(result)
    assert result["errors"] == []
    if len(result["warnings"]) != 5:
        raise AssertionError(result["warnings"])


def test_validate_config_missing_file(config_fixture):
    missing = config_fixture("does_not_exist.yaml")
    exit_code, result = validate_config(missing, lenient=False)

    if exit_code != 1:
        raise AssertionError
    if "File not found or unreadable" not in result["errors"][0]:
        raise AssertionError
    if missing not in result["errors"][0]:
        raise AssertionError
    assert result.get("warnings") == []


def test_validate_config_unknown_key(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"generation": {"tab_width": 4}}), encoding="utf-8")

    exit_code, result = validate_config(str(path))

    assert exit_code == 1
    assert "Invalid configuration file" in result["errors"][0]


def test_defaults_are_valid():
    config = Config()

    assert config.validate() == []
    options = config.generation.to_options()
    assert (options.indent_size, options.indent_char, options.include_comments) == (2, " ", True)
    assert config.parsing.to_options().use_indentation is False


def test_wide_indent_is_valid():
    config = Config(generation=GenerationConfig(indent_size=32))

    assert config.validate() == []
    assert config.generation.to_options().indent_size == 32


def test_load_missing_file_gives_defaults(tmp_path):
    config = ConfigManager.load(tmp_path / "absent.yaml")

    if config != Config():
        raise AssertionError(config)


def test_load_yaml_file(config_fixture):
    config = ConfigManager.load(config_fixture("valid_config.yaml"))

    assert config.generation.default_target == "javascript"
    assert config.generation.indent_size == 4
    assert config.generation.indent_char == " "


def test_env_overrides_file(config_fixture, monkeypatch):
    monkeypatch.setenv("PSEUDOCONV_INDENT_SIZE", "8")
    monkeypatch.setenv("PSEUDOCONV_INDENT_CHAR", "tab")
    monkeypatch.setenv("PSEUDOCONV_DEFAULT_TARGET", "Go")
    monkeypatch.setenv("PSEUDOCONV_USE_INDENTATION", "yes")

    config = ConfigManager.load(config_fixture("valid_config.yaml"))

    assert config.generation.indent_size == 8
    assert config.generation.indent_char == "\t"
    assert config.generation.default_target == "go"
    assert config.parsing.use_indentation is True


def test_bad_integer_from_env_is_ignored(monkeypatch):
    monkeypatch.setenv("PSEUDOCONV_INDENT_SIZE", "wide")

    config = Config()
    applied = config.apply_env_overrides()

    assert "PSEUDOCONV_INDENT_SIZE" not in applied
    assert config.generation.indent_size == 2


def test_invalid_values_raise_in_strict_mode(config_fixture):
    with pytest.raises(ConfigurationError) as excinfo:
        ConfigManager.load(config_fixture("invalid_config.yaml"))

    assert "Invalid configuration" in excinfo.value.message


def test_lenient_env_downgrades_errors_to_warnings(config_fixture, monkeypatch, caplog):
    monkeypatch.setenv("PSEUDOCONV_LENIENT_CONFIG", "true")

    config = ConfigManager.load(config_fixture("invalid_config.yaml"))

    assert config.generation.default_target == "cobol"
    if "Config warning" not in caplog.text:
        raise AssertionError(caplog.text)


def test_env_only_invalid_value_is_caught(monkeypatch):
    monkeypatch.setenv("PSEUDOCONV_DEFAULT_TARGET", "fortran")

    with pytest.raises(ConfigurationError):
        ConfigManager.load()
    assert ConfigManager.load(strict=False).generation.default_target == "fortran"


def test_unreadable_file_falls_back_to_defaults(tmp_path):
    path = tmp_path / "broken.yaml"
    path.write_text("generation: [unclosed", encoding="utf-8")

    assert ConfigManager.load(path) == Config()


@pytest.mark.parametrize("name", ["saved.yaml", "saved.json"])
def test_save_and_reload(tmp_path, name):
    config = Config(generation=GenerationConfig(default_target="scala", indent_size=4, indent_char="\t"))

    written = ConfigManager.save(config, tmp_path / "nested" / name)

    assert written.exists()
    if ConfigManager.load(written) != config:
        raise AssertionError(written.read_text())


def test_saved_yaml_is_plain_mapping(tmp_path):
    path = ConfigManager.save(Config(), tmp_path / "config.yaml")

    data = yaml.safe_load(Path(path).read_text(encoding="utf-8"))
    assert data["generation"]["default_target"] == "python"
    assert data["parsing"]["default_source"] == "auto"


def test_from_dict_rejects_unknown_keys():
    with pytest.raises(TypeError):
        Config.from_dict({"colour": "blue"})


def test_get_config_info(tmp_path, config_fixture):
    missing = ConfigManager.get_config_info(tmp_path / "none.yaml")
    assert missing["exists"] is False
    assert missing["is_valid"] is False

    valid = ConfigManager.get_config_info(config_fixture("valid_config.yaml"))
    assert valid["is_valid"] is True
    assert valid["version"] == "1.0"

    invalid = ConfigManager.get_config_info(config_fixture("invalid_config.yaml"))
    assert invalid["is_valid"] is False
    assert len(invalid["issues"]) == 5


def test_default_path_honours_env(monkeypatch, tmp_path):
    monkeypatch.setenv("PSEUDOCONV_CONFIG", str(tmp_path / "custom.yaml"))
    assert ConfigManager.default_path() == tmp_path / "custom.yaml"

    monkeypatch.delenv("PSEUDOCONV_CONFIG")
    assert ConfigManager.default_path() == ConfigManager.DEFAULT_CONFIG_PATH
