import smtplib
from datetime import datetime

import pytest

from dbbackup.errors import ConfigurationError, NotificationDeliveryError
from dbbackup.messages import MessageCatalog
from dbbackup.models import BackupConfig, BackupRun
from dbbackup.services.notification import (
    EmailNotifier,
    NotificationComposer,
    NullNotifier,
    WebhookNotifier,
    build_notifier,
)


class DummyLogger:
    def debug(self, *_args, **_kwargs):
        return None

    def warning(self, *_args, **_kwargs):
        return None


def build_run(**overrides):
    values = {
        "db_name": "shop",
        "backup_time": datetime(2024, 5, 1, 3, 30, 0),
        "resolved_file_path": "/srv/backups/shop-3.sql.gz",
        "authenticated": True,
        "elapsed_seconds": 125.0,
        "exit_code": 0,
        "file_size_bytes": 1536,
    }
    values.update(overrides)
    return BackupRun(**values)


def build_config(**overrides):
    values = {"db_user": "backup", "db_password": "pw", "db_name": "shop", "shared_secret": "s"}
    values.update(overrides)
    return BackupConfig(**values)


def test_compose_substitutes_every_token():
    composer = NotificationComposer("%Y-%m-%d %H:%M")
    template = "{DBNAME}|{FILENAME}|{SUCCESS}|{SIZE}|{BACKUPTIME}|{TIMESPENT}"

    body = composer.compose(template, build_run())

    assert body == "shop|/srv/backups/shop-3.sql.gz|0|1.5 KB|2024-05-01 03:30|2 minutes"


def test_compose_message_reports_dump_exit_code():
    composer = NotificationComposer("%Y-%m-%d %H:%M:%S")

    subject, body = composer.compose_message(build_run(exit_code=2))

    assert subject == "Backup of database"
    assert "Return code of dump command: 2" in body
    assert "Time of backup: 2024-05-01 03:30:00" in body
    assert "{" not in body


def test_compose_message_uses_catalog_overrides():
    catalog = MessageCatalog({"email_subject": "Sicherung", "email_body": "{DBNAME}: {SUCCESS}"})
    composer = NotificationComposer("%Y", catalog=catalog)

    assert composer.compose_message(build_run()) == ("Sicherung", "shop: 0")


class FakeSMTP:
    sent = []

    def __init__(self, host, port, timeout=None):
        self.host = host
        self.port = port

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        return False

    def send_message(self, message):
        FakeSMTP.sent.append((self.host, self.port, message))


class FailingSMTP(FakeSMTP):
    def send_message(self, message):
        raise smtplib.SMTPException("relay refused")


def test_email_notifier_sends_message():
    FakeSMTP.sent = []
    notifier = EmailNotifier(
        "ops@example.com",
        smtp_host="mail.example.com",
        smtp_port=2525,
        sender_name="DbBackup",
        logger=DummyLogger(),
        smtp_factory=FakeSMTP,
    )

    notifier.send("Backup of database", "body")

    host, port, message = FakeSMTP.sent[0]
    assert (host, port) == ("mail.example.com", 2525)
    assert message["To"] == "ops@example.com"
    assert message["From"] == "DbBackup <ops@example.com>"
    assert message.get_content().strip() == "body"


def test_email_notifier_wraps_smtp_failures():
    notifier = EmailNotifier(
        "ops@example.com",
        smtp_host="localhost",
        smtp_port=25,
        sender_name="DbBackup",
        logger=DummyLogger(),
        smtp_factory=FailingSMTP,
    )

    with pytest.raises(NotificationDeliveryError, match="relay refused"):
        notifier.send("subject", "body")


class FakeRequestsModule:
    class RequestException(Exception):
        pass

    def __init__(self, fail=False):
        self.fail = fail
        self.calls = []

    def post(self, url, json=None, timeout=None):
        self.calls.append((url, json, timeout))
        if self.fail:
            raise self.RequestException("connection refused")
        return FakeResponse()


class FakeResponse:
    def raise_for_status(self):
        return None


def test_webhook_notifier_posts_json():
    fake_requests = FakeRequestsModule()
    notifier = WebhookNotifier(
        "https://hooks.example.com/backup", logger=DummyLogger(), requests_module=fake_requests
    )

    notifier.send("subject", "body")

    assert fake_requests.calls == [
        ("https://hooks.example.com/backup", {"subject": "subject", "text": "body"}, 30.0)
    ]


def test_webhook_notifier_wraps_request_failures():
    notifier = WebhookNotifier(
        "https://hooks.example.com/backup",
        logger=DummyLogger(),
        requests_module=FakeRequestsModule(fail=True),
    )

    with pytest.raises(NotificationDeliveryError, match="connection refused"):
        notifier.send("subject", "body")


def test_build_notifier_picks_backend_from_address():
    logger = DummyLogger()

    assert isinstance(build_notifier(build_config(), logger), NullNotifier)
    assert isinstance(
        build_notifier(build_config(notify_address="ops@example.com"), logger), EmailNotifier
    )
    assert isinstance(
        build_notifier(build_config(notify_address="https://hooks.example.com/x"), logger),
        WebhookNotifier,
    )


def test_build_notifier_refuses_plain_http_webhook():
    with pytest.raises(ConfigurationError, match="insecure HTTP"):
        build_notifier(build_config(notify_address="http://hooks.example.com/x"), DummyLogger())


def test_email_notifier_wraps_malformed_address():
    FakeSMTP.sent = []
    notifier = EmailNotifier(
        "ops@example.com\nBcc: x@example.com",
        smtp_host="localhost",
        smtp_port=25,
        sender_name="DbBackup",
        logger=DummyLogger(),
        smtp_factory=FakeSMTP,
    )

    with pytest.raises(NotificationDeliveryError):
        notifier.send("subject", "body")

    assert FakeSMTP.sent == []
