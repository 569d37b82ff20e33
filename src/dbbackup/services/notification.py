"""Completion notification composing and delivery for dbbackup."""

import smtplib
from email.message import EmailMessage
from typing import Optional, Tuple

import requests

from dbbackup.errors import NotificationDeliveryError
from dbbackup.messages import MessageCatalog
from dbbackup.models import BackupConfig, BackupRun
from dbbackup.services.formatting import format_duration, format_size
from dbbackup.services.validation import ValidationService


class NotificationComposer:
    """Fills backup metadata into a notification template."""

    def __init__(self, date_format: str, catalog: Optional[MessageCatalog] = None):
        self.date_format = date_format
        self.catalog = catalog or MessageCatalog()

    def compose(self, template: str, run: BackupRun) -> str:
        replacements = {
            "{DBNAME}": run.db_name,
            "{FILENAME}": run.resolved_file_path,
            "{SUCCESS}": str(run.exit_code),
            "{SIZE}": format_size(run.file_size_bytes),
            "{BACKUPTIME}": run.backup_time.strftime(self.date_format),
            "{TIMESPENT}": format_duration(run.elapsed_seconds, 0, catalog=self.catalog),
        }
        body = template
        for token, value in replacements.items():
            body = body.replace(token, value)
        return body

    def compose_message(self, run: BackupRun) -> Tuple[str, str]:
        subject = self.catalog.raw("email_subject")
        body = self.compose(self.catalog.raw("email_body"), run)
        return subject, body


class NullNotifier:
    """Used when no notification address is configured."""

    def send(self, subject: str, body: str):
        return None


class EmailNotifier:
    def __init__(
        self,
        address: str,
        smtp_host: str,
        smtp_port: int,
        sender_name: str,
        logger,
        smtp_factory=smtplib.SMTP,
    ):
        self.address = address
        self.smtp_host = smtp_host
        self.smtp_port = smtp_port
        self.sender_name = sender_name
        self.logger = logger
        self.smtp_factory = smtp_factory

    def build_message(self, subject: str, body: str) -> EmailMessage:
        message = EmailMessage()
        message["Subject"] = subject
        message["From"] = f"{self.sender_name} <{self.address}>"
        message["To"] = self.address
        message.set_content(body)
        return message

    def send(self, subject: str, body: str):
        self.logger.debug(
            "Sending notification to %s via %s:%s", self.address, self.smtp_host, self.smtp_port
        )
        try:
            message = self.build_message(subject, body)
            with self.smtp_factory(self.smtp_host, self.smtp_port, timeout=30) as smtp:
                smtp.send_message(message)
        except (smtplib.SMTPException, OSError, ValueError) as exc:
            raise NotificationDeliveryError(f"Could not send email to {self.address}: {exc}") from exc


class WebhookNotifier:
    """Posts the notification as JSON to an HTTP(S) endpoint."""

    def __init__(self, url: str, logger, timeout: float = 30.0, requests_module=requests):
        self.url = url
        self.logger = logger
        self.timeout = timeout
        self.requests = requests_module

    def send(self, subject: str, body: str):
        self.logger.debug("Posting notification to %s", self.url)
        try:
            response = self.requests.post(
                self.url,
                json={"subject": subject, "text": body},
                timeout=self.timeout,
            )
            response.raise_for_status()
        except self.requests.RequestException as exc:
            raise NotificationDeliveryError(f"Could not post notification to {self.url}: {exc}") from exc


def build_notifier(config: BackupConfig, logger, validation_service: Optional[ValidationService] = None):
    address = (config.notify_address or "").strip()
    if not address:
        return NullNotifier()

    validation_service = validation_service or ValidationService()
    if validation_service.is_url(address):
        validation_service.enforce_https_policy(
            address,
            "notification URL",
            config.allow_insecure_http,
            logger,
        )
        return WebhookNotifier(address, logger=logger)

    return EmailNotifier(
        address,
        smtp_host=config.smtp_host,
        smtp_port=config.smtp_port,
        sender_name=config.sender_name,
        logger=logger,
    )
