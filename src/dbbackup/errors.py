"""Domain errors for dbbackup."""


class BackupError(RuntimeError):
    """Raised when the backup cannot continue safely."""


class ConfigurationError(BackupError):
    """Operator misconfiguration. Never retried."""


class EmptyFilenameError(ConfigurationError):
    pass


class DirectoryMissingError(ConfigurationError):
    pass


class NotWritableError(ConfigurationError):
    pass


class NotADirectoryError(ConfigurationError):  # noqa: A001
    pass


class AuthenticationError(BackupError):
    """Raised when the supplied credential does not match the shared secret."""


class NotAuthenticatedError(BackupError):
    """Raised when a backup is requested before a successful authentication."""


class NotificationDeliveryError(BackupError):
    """Raised by notifiers. The orchestrator logs it and carries on."""
