"""
Error taxonomy for the watcher.

ConfigError and RepositoryEnvironmentError are fatal and carry the process
exit code. CycleError only ever aborts the current commit/push cycle.
"""
from typing import Optional


class AutopushError(Exception):
    exit_code = 1


class ConfigError(AutopushError):
    """Missing config file or required fields"""

    exit_code = 1


class RepositoryEnvironmentError(AutopushError):
    """Repository path cannot be entered"""

    exit_code = 2


class NotAWorkTreeError(RepositoryEnvironmentError):
    """Repository path is not a git working tree"""

    exit_code = 3


class CycleError(AutopushError):
    """
    A stage of the commit/push/notify cycle failed.
    Logged and swallowed by the processor, never fatal.
    """

    def __init__(self, stage: str, message: str, output: Optional[str] = None):
        super().__init__(f"{stage} failed: {message}")
        self.stage = stage
        self.output = output
