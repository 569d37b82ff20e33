"""Subprocess execution service for dbbackup."""

import subprocess
from typing import Dict, List, Optional, Sequence

# Exit statuses a POSIX shell reports for a command it cannot execute or find.
COMMAND_NOT_EXECUTABLE = 126
COMMAND_NOT_FOUND = 127


class CommandRunner:
    """Runs external command pipelines without a shell and without a timeout."""

    def __init__(self, logger, popen=subprocess.Popen):
        self.logger = logger
        self.popen = popen

    def run_pipeline(
        self,
        commands: Sequence[List[str]],
        output_path: str,
        env: Optional[Dict[str, str]] = None,
    ) -> List[int]:
        """Chains ``commands`` stdout to stdin and writes the last stage to ``output_path``.

        Returns one exit status per command, collected after every process has
        terminated. A command that cannot be found reports ``127``; one that
        exists but cannot be executed reports ``126``.
        """
        if not commands:
            raise ValueError("At least one command is required.")

        pipeline_str = " | ".join(" ".join(cmd) for cmd in commands)
        self.logger.debug("Executing: %s > %s", pipeline_str, output_path)

        processes: List[subprocess.Popen] = []
        with open(output_path, "wb") as output:
            upstream = None
            try:
                for index, cmd in enumerate(commands):
                    is_last = index == len(commands) - 1
                    process = self.popen(
                        cmd,
                        stdin=upstream,
                        stdout=output if is_last else subprocess.PIPE,
                        env=env,
                    )
                    if upstream is not None:
                        # Downstream owns the pipe now; closing ours lets SIGPIPE propagate.
                        upstream.close()
                    upstream = process.stdout
                    processes.append(process)
            except OSError as exc:
                failed_command = commands[len(processes)][0]
                if isinstance(exc, FileNotFoundError):
                    self.logger.error("Required command not found: %s", failed_command)
                    exit_code = COMMAND_NOT_FOUND
                else:
                    self.logger.error("Could not execute %s: %s", failed_command, exc)
                    exit_code = COMMAND_NOT_EXECUTABLE
                if upstream is not None:
                    upstream.close()
                for process in processes:
                    process.kill()
                    process.wait()
                return [exit_code] * len(commands)

            return_codes = [process.wait() for process in processes]

        for cmd, code in zip(commands, return_codes):
            if code != 0:
                self.logger.warning("Command failed (%s): %s", code, " ".join(cmd))
        return return_codes
