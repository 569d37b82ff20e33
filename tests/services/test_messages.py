import pytest

from dbbackup.messages import MessageCatalog


def test_catalog_formats_path_into_error_message():
    catalog = MessageCatalog()

    message = catalog.format("error_not_dir", path="/srv/backups")

    assert message.endswith("please change the value: /srv/backups")


def test_catalog_keeps_notification_tokens_literal():
    catalog = MessageCatalog()

    assert "{DBNAME}" in catalog.format("email_body", path="ignored")


def test_catalog_overrides_and_rejects_unknown_keys():
    catalog = MessageCatalog({"all_done": "Sicherung abgeschlossen."})

    assert catalog.raw("all_done") == "Sicherung abgeschlossen."
    with pytest.raises(KeyError):
        MessageCatalog({"no_such_key": "x"})
