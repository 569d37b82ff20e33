"""Configuration, directory and URL validation helpers for dbbackup."""

import os
from typing import Optional
from urllib.parse import urlparse

from dbbackup.errors import (
    ConfigurationError,
    DirectoryMissingError,
    NotADirectoryError,
    NotWritableError,
)
from dbbackup.messages import MessageCatalog
from dbbackup.models import BackupConfig, CompressionMode


class ValidationService:
    """Validates configuration values and the backup destination."""

    def __init__(self, catalog: Optional[MessageCatalog] = None):
        self.catalog = catalog or MessageCatalog()

    def is_url(self, location: str) -> bool:
        scheme = urlparse(location).scheme.lower()
        return scheme in {"http", "https"}

    def enforce_https_policy(self, location: str, label: str, allow_insecure_http: bool, logger):
        if not self.is_url(location):
            return

        scheme = urlparse(location).scheme.lower()
        if scheme == "http" and not allow_insecure_http:
            raise ConfigurationError(
                f"{label} uses insecure HTTP. Switch to HTTPS or enable "
                "`allow_insecure_http` only for trusted endpoints."
            )

        if scheme == "http":
            logger.warning("Insecure HTTP enabled for %s: %s", label, location)

    def validate_config(self, config: BackupConfig):
        if not config.db_name or not config.db_name.strip():
            raise ConfigurationError("Database name must not be empty.")

        if not config.db_user or not config.db_user.strip():
            raise ConfigurationError("Database user must not be empty.")

        if not config.shared_secret:
            raise ConfigurationError(
                "Shared secret must not be empty. Set `shared_secret` or DBBACKUP_SHARED_SECRET."
            )

        if not config.filename_template or not config.filename_template.strip():
            raise ConfigurationError(self.catalog.format("error_no_filename"))

        if not config.dump_command or not config.dump_command.strip():
            raise ConfigurationError("Dump command must not be empty.")

        if not isinstance(config.compression_mode, CompressionMode):
            raise ConfigurationError(
                f"Invalid compression mode: {config.compression_mode!r}. "
                f"Supported modes: {', '.join(CompressionMode.choices())}"
            )

        if not 0 < int(config.smtp_port) < 65536:
            raise ConfigurationError(f"Invalid SMTP port: {config.smtp_port}")

    def validate_directory(self, path: str):
        if not os.path.exists(path):
            raise DirectoryMissingError(self.catalog.format("error_no_file", path=path))

        if not os.path.isdir(path):
            raise NotADirectoryError(self.catalog.format("error_not_dir", path=path))

        if not os.access(path, os.W_OK):
            raise NotWritableError(self.catalog.format("error_not_writable", path=path))
