"""Configuration loader for dbbackup."""

from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from dbbackup.errors import ConfigurationError


class ConfigLoader:
    """Loads YAML configuration files for CLI defaults."""

    SUPPORTED_KEYS = {
        "db_host",
        "db_user",
        "db_password",
        "db_name",
        "destination_dir",
        "shared_secret",
        "notify_address",
        "date_format",
        "filename_template",
        "compression",
        "dump_command",
        "smtp_host",
        "smtp_port",
        "sender_name",
        "allow_insecure_http",
        "verbose",
        "log_file",
        "messages",
    }

    def load(self, config_path: Optional[str]) -> Dict[str, Any]:
        if not config_path:
            return {}

        path = Path(config_path)
        if not path.exists():
            raise ConfigurationError(f"Config file not found: {config_path}")

        try:
            parsed = yaml.safe_load(path.read_text(encoding="utf-8"))
        except (yaml.YAMLError, OSError) as exc:
            raise ConfigurationError(f"Invalid config file '{config_path}': {exc}") from exc

        if parsed is None:
            return {}
        if not isinstance(parsed, dict):
            raise ConfigurationError("Config file must contain a YAML mapping at the root.")

        unknown = sorted(set(parsed.keys()) - self.SUPPORTED_KEYS)
        if unknown:
            unknown_list = ", ".join(unknown)
            raise ConfigurationError(f"Unknown configuration keys: {unknown_list}")

        messages = parsed.get("messages")
        if messages is not None and not isinstance(messages, dict):
            raise ConfigurationError("`messages` must be a mapping of catalog keys to text.")

        return parsed
