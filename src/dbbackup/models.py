"""Shared domain models for dbbackup."""

import enum
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

DEFAULT_FILENAME_TEMPLATE = "{DBNAME}-%u.sql"
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class CompressionMode(enum.Enum):
    NONE = "none"
    GZIP = "gzip"
    BZIP2 = "bzip2"

    @property
    def suffix(self) -> str:
        return {"none": "", "gzip": ".gz", "bzip2": ".bz2"}[self.value]

    @property
    def compressor(self) -> Optional[List[str]]:
        if self is CompressionMode.NONE:
            return None
        return [self.value, "-c"]

    @classmethod
    def choices(cls) -> List[str]:
        return [mode.value for mode in cls]


@dataclass(frozen=True)
class BackupConfig:
    """Settings for one database backup. Built once, validated separately."""

    db_user: str
    db_password: str
    db_name: str
    shared_secret: str = ""
    destination_dir: str = "/tmp"
    db_host: str = "localhost"
    notify_address: str = ""
    compression_mode: CompressionMode = CompressionMode.NONE
    date_format: str = DEFAULT_DATE_FORMAT
    filename_template: str = DEFAULT_FILENAME_TEMPLATE
    dump_command: str = "mysqldump"
    smtp_host: str = "localhost"
    smtp_port: int = 25
    sender_name: str = "DbBackup"
    allow_insecure_http: bool = False


@dataclass
class BackupRun:
    """Mutable state of a single backup execution."""

    db_name: str
    backup_time: datetime
    resolved_file_path: str = ""
    authenticated: bool = False
    elapsed_seconds: float = 0.0
    exit_code: int = 0
    file_size_bytes: int = 0

    @property
    def succeeded(self) -> bool:
        return self.exit_code == 0


@dataclass(frozen=True)
class DumpResult:
    exit_code: int
    elapsed_seconds: float
    path: str
