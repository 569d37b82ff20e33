"""Message catalog for dbbackup."""

from typing import Dict, Mapping, Optional

DEFAULT_MESSAGES: Dict[str, str] = {
    "all_done": "Backup has been finished.",
    "error_incorrect_password": "Incorrect password.",
    "error_not_auth": "Must be authenticated to make backup.",
    "error_no_file": (
        "Backup directory doesn't exist, please create it, or change the value: {path}"
    ),
    "error_not_writable": (
        "Can't write to backup directory, please change the directory permissions "
        "on directory: {path}"
    ),
    "error_not_dir": "Path is a file, not a directory, please change the value: {path}",
    "error_no_filename": "Must have a filename to dump database to.",
    "seconds": "seconds",
    "minutes": "minutes",
    "hours": "hours",
    "days": "days",
    "email_subject": "Backup of database",
    "email_body": (
        "Backup of {DBNAME}:\n"
        "Time of backup: {BACKUPTIME}\n"
        "Backup took: {TIMESPENT}\n"
        "Return code of dump command: {SUCCESS}\n"
        "Filename of backup: {FILENAME}\n"
        "Backup file size: {SIZE}"
    ),
}

# Keys whose templates hold literal {TOKENS} and must not go through str.format.
_RAW_KEYS = {"email_body"}


class MessageCatalog:
    """Key to template lookup. Overrides replace individual entries."""

    def __init__(self, overrides: Optional[Mapping[str, str]] = None):
        self._messages: Dict[str, str] = dict(DEFAULT_MESSAGES)
        if overrides:
            unknown = sorted(set(overrides) - set(DEFAULT_MESSAGES))
            if unknown:
                raise KeyError(f"Unknown message catalog keys: {', '.join(unknown)}")
            self._messages.update({key: str(value) for key, value in overrides.items()})

    def raw(self, key: str) -> str:
        if key not in self._messages:
            raise KeyError(f"Unknown message catalog key: {key}")
        return self._messages[key]

    def format(self, key: str, **kwargs: str) -> str:
        template = self.raw(key)
        if key in _RAW_KEYS or not kwargs:
            return template
        return template.format(**kwargs)
