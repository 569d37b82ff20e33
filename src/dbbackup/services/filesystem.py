"""Filesystem helpers for dbbackup."""

import logging
import os
import sys
import tempfile

CREDENTIALS_FILE_MODE = 0o600


class FileSystemService:
    """Encapsulates file side effects around a backup artifact."""

    def __init__(self, logger: logging.Logger):
        self.logger = logger

    def set_permissions(self, path: str, mode: int):
        if sys.platform == "win32":
            return

        try:
            os.chmod(path, mode)
        except OSError as exc:
            self.logger.warning("Could not set permissions on %s: %s", path, exc)

    def remove_stale_file(self, path: str) -> bool:
        if not os.path.exists(path):
            return False

        os.remove(path)
        self.logger.info("Removed previous backup at %s", path)
        return True

    def file_size(self, path: str) -> int:
        try:
            return os.path.getsize(path)
        except OSError as exc:
            self.logger.warning("Could not read size of %s: %s", path, exc)
            return 0

    def write_private_file(self, content: str, prefix: str, suffix: str = "") -> str:
        """Writes ``content`` to a new temporary file readable only by the owner."""
        fd, temp_path = tempfile.mkstemp(prefix=prefix, suffix=suffix)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as file_obj:
                file_obj.write(content)
        except OSError:
            self.remove_quietly(temp_path)
            raise
        self.set_permissions(temp_path, CREDENTIALS_FILE_MODE)
        return temp_path

    def remove_quietly(self, path: str):
        try:
            os.remove(path)
        except OSError as exc:
            self.logger.warning("Could not remove %s: %s", path, exc)
