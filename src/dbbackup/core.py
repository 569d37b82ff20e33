import enum
import logging
from datetime import datetime
from typing import Callable, Optional

from rich.console import Console

from .errors import (
    AuthenticationError,
    BackupError,
    ConfigurationError,
    NotAuthenticatedError,
    NotificationDeliveryError,
)
from .messages import MessageCatalog
from .models import BackupConfig, BackupRun
from .services.auth import AuthGate
from .services.command_runner import CommandRunner
from .services.dump import DumpExecutor
from .services.filename import FilenamePolicy
from .services.filesystem import FileSystemService
from .services.formatting import format_duration, format_size
from .services.notification import NotificationComposer, build_notifier
from .services.validation import ValidationService

console = Console()
logger = logging.getLogger("dbbackup")


class BackupState(enum.Enum):
    CREATED = "created"
    AUTHENTICATED = "authenticated"
    DIRECTORY_VALIDATED = "directory_validated"
    DUMPED = "dumped"
    REPORTED = "reported"
    DONE = "done"
    FAILED = "failed"


class BackupOrchestrator:
    """Runs one authenticated backup of one database and reports on it.

    Instances hold the state of a single run and are not meant to be shared
    between threads.
    """

    def __init__(
        self,
        config: BackupConfig,
        catalog: Optional[MessageCatalog] = None,
        dump_executor: Optional[DumpExecutor] = None,
        notifier=None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.config = config
        self.catalog = catalog or MessageCatalog()
        self.clock = clock

        self.validation_service = ValidationService(catalog=self.catalog)
        self.filesystem_service = FileSystemService(logger=logger)
        self.filename_policy = FilenamePolicy(catalog=self.catalog)
        self.auth_gate = AuthGate(config.shared_secret, catalog=self.catalog)
        self.command_runner = CommandRunner(logger=logger)
        self.dump_executor = dump_executor or DumpExecutor(
            logger=logger,
            command_runner=self.command_runner,
            filesystem_service=self.filesystem_service,
        )
        self.composer = NotificationComposer(config.date_format, catalog=self.catalog)
        self.notifier = notifier

        self.state = BackupState.CREATED
        self.current_run: Optional[BackupRun] = None
        self.status_message = ""

    @property
    def authenticated(self) -> bool:
        return self.auth_gate.authenticated

    def _fail(self, exc: BaseException):
        self.state = BackupState.FAILED
        logger.debug("Backup entered failed state: %s", exc)

    def validate(self):
        """Checks the configuration before any credential or filesystem work."""
        try:
            self.validation_service.validate_config(self.config)
            self._get_notifier()
        except ConfigurationError as exc:
            self._fail(exc)
            raise

    def _get_notifier(self):
        if self.notifier is None:
            self.notifier = build_notifier(self.config, logger, self.validation_service)
        return self.notifier

    def authenticate(self, secret: Optional[str]):
        try:
            self.auth_gate.authenticate(secret)
        except AuthenticationError as exc:
            logger.warning("Rejected backup request for %s: bad credential.", self.config.db_name)
            self._fail(exc)
            raise
        if self.state in (BackupState.CREATED, BackupState.FAILED, BackupState.DONE):
            self.state = BackupState.AUTHENTICATED

    def backup(self) -> BackupRun:
        if not self.auth_gate.authenticated:
            exc = NotAuthenticatedError(self.catalog.format("error_not_auth"))
            self._fail(exc)
            raise exc

        run = BackupRun(
            db_name=self.config.db_name,
            backup_time=self.clock(),
            authenticated=True,
        )
        self.current_run = run
        self.status_message = ""

        try:
            notifier = self._get_notifier()
            self.validation_service.validate_directory(self.config.destination_dir)
            self.state = BackupState.DIRECTORY_VALIDATED

            resolved_path = self.filename_policy.resolve_path(
                self.config.destination_dir,
                self.config.filename_template,
                self.config.db_name,
                run.backup_time,
            )
        except ConfigurationError as exc:
            self._fail(exc)
            raise

        run.resolved_file_path = self.dump_executor.target_path(self.config, resolved_path)

        try:
            result = self.dump_executor.dump(self.config, resolved_path)
        except OSError as exc:
            self._fail(exc)
            raise BackupError(f"Could not write backup file {run.resolved_file_path}: {exc}") from exc

        run.resolved_file_path = result.path
        run.exit_code = result.exit_code
        run.elapsed_seconds = result.elapsed_seconds
        self.state = BackupState.DUMPED

        run.file_size_bytes = self.filesystem_service.file_size(run.resolved_file_path)
        logger.info(
            "Backup file %s is %s (took %s).",
            run.resolved_file_path,
            format_size(run.file_size_bytes),
            format_duration(run.elapsed_seconds, 0, catalog=self.catalog),
        )

        subject, body = self.composer.compose_message(run)
        try:
            notifier.send(subject, body)
        except NotificationDeliveryError as exc:
            logger.warning("Notification was not delivered: %s", exc)
        self.state = BackupState.REPORTED

        self.status_message = self.catalog.raw("all_done")
        self.state = BackupState.DONE
        return run

    def run(self, secret: Optional[str]) -> int:
        try:
            logger.info("Starting backup of database %s...", self.config.db_name)
            self.validate()
            self.authenticate(secret)
            run = self.backup()

            console.print(f"[green]{self.status_message}[/green]")
            if not run.succeeded:
                console.print(
                    f"[yellow]Warning:[/yellow] dump command returned {run.exit_code}. "
                    f"Inspect {run.resolved_file_path} before relying on it."
                )
                return 1
            return 0

        except KeyboardInterrupt:
            console.print("[bold red]Operation cancelled by user.[/bold red]")
            logger.info("Operation cancelled by user")
            self.state = BackupState.FAILED
            return 1
        except (AuthenticationError, NotAuthenticatedError) as exc:
            console.print(f"[bold red]Access denied:[/bold red] {exc}")
            return 1
        except BackupError as exc:
            console.print(f"[bold red]Error:[/bold red] {exc}")
            logger.error(str(exc))
            return 1
        except Exception as exc:
            console.print(f"[bold red]Unexpected error:[/bold red] {exc}")
            logger.exception("Unexpected error")
            self.state = BackupState.FAILED
            return 1
