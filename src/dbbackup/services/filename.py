"""Backup file naming policy."""

import os
from datetime import datetime
from typing import Optional

from dbbackup.errors import EmptyFilenameError
from dbbackup.messages import MessageCatalog

DBNAME_TOKEN = "{DBNAME}"


class FilenamePolicy:
    """Derives the backup file name from a strftime template and the db name.

    Distinct names per period (``%u`` weekday, ``%d`` day of month) are what
    give a rotating set of backups; each name holds only its latest dump.
    """

    def __init__(self, catalog: Optional[MessageCatalog] = None):
        self.catalog = catalog or MessageCatalog()

    def resolve(self, template: str, db_name: str, now: datetime) -> str:
        filename = now.strftime(template)
        filename = filename.replace(DBNAME_TOKEN, db_name)
        if not filename.strip():
            raise EmptyFilenameError(self.catalog.format("error_no_filename"))
        return filename

    def resolve_path(self, directory: str, template: str, db_name: str, now: datetime) -> str:
        return os.path.join(directory, self.resolve(template, db_name, now))
