import pytest

from dbbackup.errors import ConfigurationError
from dbbackup.services.config_loader import ConfigLoader


def test_config_loader_loads_yaml_mapping(tmp_path):
    config_file = tmp_path / ".dbbackup.yml"
    config_file.write_text(
        "db_name: shop\ncompression: gzip\nsmtp_port: 2525\nmessages:\n  all_done: Fertig.\n",
        encoding="utf-8",
    )

    loaded = ConfigLoader().load(str(config_file))

    assert loaded["db_name"] == "shop"
    assert loaded["compression"] == "gzip"
    assert loaded["smtp_port"] == 2525
    assert loaded["messages"] == {"all_done": "Fertig."}


def test_config_loader_returns_empty_mapping_without_path():
    assert ConfigLoader().load(None) == {}


def test_config_loader_rejects_unknown_keys(tmp_path):
    config_file = tmp_path / ".dbbackup.yml"
    config_file.write_text("unknown_key: true\n", encoding="utf-8")

    with pytest.raises(ConfigurationError, match="Unknown configuration keys"):
        ConfigLoader().load(str(config_file))


def test_config_loader_rejects_non_mapping_messages(tmp_path):
    config_file = tmp_path / ".dbbackup.yml"
    config_file.write_text("messages: [a, b]\n", encoding="utf-8")

    with pytest.raises(ConfigurationError, match="messages"):
        ConfigLoader().load(str(config_file))


def test_config_loader_reports_missing_file(tmp_path):
    with pytest.raises(ConfigurationError, match="Config file not found"):
        ConfigLoader().load(str(tmp_path / "nope.yml"))
