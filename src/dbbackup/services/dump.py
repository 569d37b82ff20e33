"""Database dump execution service for dbbackup."""

import time
from typing import List

from dbbackup.models import BackupConfig, DumpResult
from dbbackup.services.command_runner import CommandRunner
from dbbackup.services.filesystem import FileSystemService


class DumpExecutor:
    """Runs the dump tool, optionally through a compressor, into the backup file."""

    def __init__(self, logger, command_runner: CommandRunner, filesystem_service: FileSystemService):
        self.logger = logger
        self.command_runner = command_runner
        self.filesystem_service = filesystem_service

    @staticmethod
    def target_path(config: BackupConfig, resolved_path: str) -> str:
        return resolved_path + config.compression_mode.suffix

    @staticmethod
    def _quote_option(value: str) -> str:
        escaped = value.replace("\\", "\\\\").replace('"', '\\"')
        return f'"{escaped}"'

    def build_options_file(self, config: BackupConfig) -> str:
        lines = [
            "[client]",
            f"user={self._quote_option(config.db_user)}",
            f"password={self._quote_option(config.db_password)}",
            f"host={self._quote_option(config.db_host)}",
        ]
        return "\n".join(lines) + "\n"

    def build_dump_command(self, config: BackupConfig, options_file: str) -> List[str]:
        # --defaults-extra-file has to be the first option mysqldump sees.
        return [config.dump_command, f"--defaults-extra-file={options_file}", config.db_name]

    def build_pipeline(self, config: BackupConfig, options_file: str) -> List[List[str]]:
        pipeline = [self.build_dump_command(config, options_file)]
        compressor = config.compression_mode.compressor
        if compressor:
            pipeline.append(compressor)
        return pipeline

    def dump(self, config: BackupConfig, resolved_path: str) -> DumpResult:
        path = self.target_path(config, resolved_path)
        self.filesystem_service.remove_stale_file(path)

        options_file = self.filesystem_service.write_private_file(
            self.build_options_file(config),
            prefix="dbbackup-",
            suffix=".cnf",
        )
        try:
            pipeline = self.build_pipeline(config, options_file)
            self.logger.info("Dumping database %s to %s", config.db_name, path)

            started = time.monotonic()
            return_codes = self.command_runner.run_pipeline(pipeline, path)
            elapsed = time.monotonic() - started
        finally:
            self.filesystem_service.remove_quietly(options_file)

        exit_code = next((code for code in return_codes if code != 0), 0)
        if exit_code != 0:
            self.logger.warning("Dump finished with exit code %s", exit_code)
        else:
            self.logger.info("Dump finished in %.1fs", elapsed)

        return DumpResult(exit_code=exit_code, elapsed_seconds=elapsed, path=path)
