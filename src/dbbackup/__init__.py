"""
dbbackup - On-demand, secret-gated database dumps with completion notices
"""

__version__ = "0.1.0"

from .core import BackupOrchestrator, BackupState
from .errors import BackupError
from .models import BackupConfig, CompressionMode

__all__ = ["BackupOrchestrator", "BackupState", "BackupError", "BackupConfig", "CompressionMode"]
