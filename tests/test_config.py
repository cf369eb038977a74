"""Tests for the TOML configuration layer."""

import pytest
import toml

from codeflatten import config_manager
from codeflatten.config_manager import (
    ConfigError,
    FlattenConfig,
    load_config,
    save_config,
    set_config_value,
)


def test_defaults_when_file_missing(tmp_path):
    cfg = load_config(tmp_path / "absent.toml")
    assert cfg.entry is None
    assert cfg.output == "flattened/Main.scala"
    assert cfg.source_roots == ["src/main/scala"]
    assert cfg.extensions == [".scala"]
    assert cfg.external_prefixes == []
    assert "target" in cfg.skip_dirs
    assert cfg.debounce_seconds == 1.0


def test_load_flatten_table(tmp_path):
    path = tmp_path / "cfg.toml"
    path.write_text(
        '[flatten]\nentry = "Player.scala"\nsource_roots = ["a", "b"]\ndebounce_seconds = 2\n',
        encoding="utf-8",
    )
    cfg = load_config(path)
    assert cfg.entry == "Player.scala"
    assert cfg.source_roots == ["a", "b"]
    assert cfg.debounce_seconds == 2.0


def test_save_preserves_other_tables(tmp_path):
    path = tmp_path / "cfg.toml"
    path.write_text('[other]\nkeep = true\n', encoding="utf-8")

    save_config(FlattenConfig(entry="Main.scala", external_prefixes=["scala"]), path)

    data = toml.load(path)
    assert data["other"] == {"keep": True}
    assert data["flatten"]["entry"] == "Main.scala"
    assert data["flatten"]["external_prefixes"] == ["scala"]


def test_unset_entry_not_written(tmp_path):
    path = save_config(FlattenConfig(), tmp_path / "cfg.toml")
    assert "entry" not in toml.load(path)["flatten"]


def test_set_value_splits_lists(tmp_path):
    path = tmp_path / "cfg.toml"
    set_config_value("external_prefixes", "scala, java,javax", path)
    assert load_config(path).external_prefixes == ["scala", "java", "javax"]


def test_set_unknown_key(tmp_path):
    with pytest.raises(ConfigError, match="Unknown config key"):
        set_config_value("colour", "blue", tmp_path / "cfg.toml")


def test_set_bad_number(tmp_path):
    with pytest.raises(ConfigError, match="must be a number"):
        set_config_value("debounce_seconds", "soon", tmp_path / "cfg.toml")


def test_wrong_type_in_file(tmp_path):
    path = tmp_path / "cfg.toml"
    path.write_text("[flatten]\nsource_roots = 3\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="list of strings"):
        load_config(path)


def test_invalid_toml(tmp_path):
    path = tmp_path / "cfg.toml"
    path.write_text("[flatten\nentry = ", encoding="utf-8")
    with pytest.raises(ConfigError, match="Invalid TOML"):
        load_config(path)


def test_unknown_keys_ignored_with_warning(tmp_path, caplog):
    path = tmp_path / "cfg.toml"
    path.write_text('[flatten]\nentry = "A.scala"\nflavour = "x"\n', encoding="utf-8")
    cfg = load_config(path)
    assert cfg.entry == "A.scala"
    assert "flavour" in caplog.text


def test_default_path_is_patched_for_tests(tmp_path):
    assert config_manager.config_path() == tmp_path / ".codeflatten.toml"
