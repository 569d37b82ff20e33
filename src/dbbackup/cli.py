import logging
import os

import click
from rich.logging import RichHandler

from .core import BackupOrchestrator
from .errors import BackupError
from .messages import MessageCatalog
from .models import DEFAULT_DATE_FORMAT, DEFAULT_FILENAME_TEMPLATE, BackupConfig, CompressionMode
from .services.config_loader import ConfigLoader

DEFAULT_CONFIG_FILE = ".dbbackup.yml"


def _resolve_option(cli_value, config, key, default=None):
    if cli_value is not None:
        return cli_value
    if key in config:
        return config[key]
    return default


logging.basicConfig(
    level="INFO",
    format="%(message)s",
    datefmt="[%X]",
    handlers=[RichHandler(rich_tracebacks=True, show_level=False, show_path=False)],
)


@click.command()
@click.option("--secret", envvar="DBBACKUP_SECRET", help="Credential presented to the backup gate.")
@click.option(
    "--config",
    required=False,
    type=click.Path(),
    help=f"Path to a YAML configuration file. Defaults to {DEFAULT_CONFIG_FILE} if present.",
)
@click.option("--db-host", required=False, help="Database host (default: localhost)")
@click.option("--db-user", required=False, help="Database user")
@click.option(
    "--db-password",
    required=False,
    envvar="DBBACKUP_DB_PASSWORD",
    help="Database password. Prefer the DBBACKUP_DB_PASSWORD environment variable.",
)
@click.option("--db-name", required=False, help="Database to dump")
@click.option(
    "--destination-dir",
    required=False,
    type=click.Path(),
    help="Directory that receives the backup file (default: /tmp)",
)
@click.option(
    "--shared-secret",
    required=False,
    envvar="DBBACKUP_SHARED_SECRET",
    help="Expected credential. Prefer the config file or DBBACKUP_SHARED_SECRET.",
)
@click.option(
    "--notify",
    "notify_address",
    required=False,
    help="Email address or HTTPS webhook URL notified when the backup finishes.",
)
@click.option(
    "--date-format",
    required=False,
    help=f"strftime format for the backup time in notifications (default: {DEFAULT_DATE_FORMAT})",
)
@click.option(
    "--filename-template",
    required=False,
    help=(
        "strftime template for the backup file name; {DBNAME} is replaced with the database "
        f"name (default: {DEFAULT_FILENAME_TEMPLATE})"
    ),
)
@click.option(
    "--compress",
    "compression",
    required=False,
    type=click.Choice(CompressionMode.choices()),
    help="Compress the dump through gzip or bzip2 (default: none)",
)
@click.option("--dump-command", required=False, help="Dump executable (default: mysqldump)")
@click.option("--smtp-host", required=False, help="SMTP relay for email notifications")
@click.option("--smtp-port", required=False, type=int, default=None, help="SMTP port (default: 25)")
@click.option(
    "--allow-insecure-http",
    is_flag=True,
    default=None,
    help="Allow an HTTP notification webhook (insecure). By default only HTTPS is accepted.",
)
@click.option("--verbose", is_flag=True, default=None, help="Enable verbose logging")
@click.option("--log-file", type=click.Path(), help="Path to log file")
def main(
    secret,
    config,
    db_host,
    db_user,
    db_password,
    db_name,
    destination_dir,
    shared_secret,
    notify_address,
    date_format,
    filename_template,
    compression,
    dump_command,
    smtp_host,
    smtp_port,
    allow_insecure_http,
    verbose,
    log_file,
):
    """Dump a database to a rotating backup file and report how it went."""
    logger = logging.getLogger("dbbackup")

    try:
        config_loader = ConfigLoader()
        resolved_config = config
        if resolved_config is None:
            default_config_path = os.path.join(os.getcwd(), DEFAULT_CONFIG_FILE)
            if os.path.exists(default_config_path):
                resolved_config = default_config_path

        config_values = config_loader.load(resolved_config)
    except BackupError as exc:
        raise click.ClickException(str(exc)) from exc

    verbose = bool(_resolve_option(verbose, config_values, "verbose", default=False))
    log_file = _resolve_option(log_file, config_values, "log_file")

    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)
        logger.setLevel(logging.DEBUG)
    else:
        logger.setLevel(logging.INFO)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(logging.DEBUG if verbose else logging.INFO)
        file_handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(message)s"))
        logger.addHandler(file_handler)

    db_user = _resolve_option(db_user, config_values, "db_user")
    db_name = _resolve_option(db_name, config_values, "db_name")
    if not db_user:
        raise click.ClickException("Missing required option '--db-user' (or provide it in config).")
    if not db_name:
        raise click.ClickException("Missing required option '--db-name' (or provide it in config).")

    compression = _resolve_option(compression, config_values, "compression", default="none")
    try:
        compression_mode = CompressionMode(str(compression).lower())
    except ValueError as exc:
        raise click.ClickException(
            f"Invalid compression '{compression}'. Supported: {', '.join(CompressionMode.choices())}"
        ) from exc

    smtp_port = _resolve_option(smtp_port, config_values, "smtp_port", default=25)
    try:
        smtp_port = int(smtp_port)
    except (TypeError, ValueError) as exc:
        raise click.ClickException(
            f"Invalid SMTP port '{smtp_port}'. Use a number such as 25 or 587."
        ) from exc

    try:
        catalog = MessageCatalog(config_values.get("messages"))
    except KeyError as exc:
        raise click.ClickException(str(exc.args[0])) from exc

    backup_config = BackupConfig(
        db_host=str(_resolve_option(db_host, config_values, "db_host", default="localhost")),
        db_user=str(db_user),
        db_password=str(_resolve_option(db_password, config_values, "db_password", default="")),
        db_name=str(db_name),
        destination_dir=str(
            _resolve_option(destination_dir, config_values, "destination_dir", default="/tmp")
        ),
        shared_secret=str(_resolve_option(shared_secret, config_values, "shared_secret", default="")),
        notify_address=str(_resolve_option(notify_address, config_values, "notify_address", default="")),
        date_format=str(
            _resolve_option(date_format, config_values, "date_format", default=DEFAULT_DATE_FORMAT)
        ),
        filename_template=str(
            _resolve_option(
                filename_template,
                config_values,
                "filename_template",
                default=DEFAULT_FILENAME_TEMPLATE,
            )
        ),
        compression_mode=compression_mode,
        dump_command=str(_resolve_option(dump_command, config_values, "dump_command", default="mysqldump")),
        smtp_host=str(_resolve_option(smtp_host, config_values, "smtp_host", default="localhost")),
        smtp_port=smtp_port,
        sender_name=str(config_values.get("sender_name", "DbBackup")),
        allow_insecure_http=bool(
            _resolve_option(allow_insecure_http, config_values, "allow_insecure_http", default=False)
        ),
    )

    orchestrator = BackupOrchestrator(config=backup_config, catalog=catalog)
    raise SystemExit(orchestrator.run(secret))


if __name__ == "__main__":
    main()
