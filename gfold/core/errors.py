"""Exit codes for the gfold CLI.

Values are used as process exit codes and should remain stable:
- 0: Success, every repository resolved
- 1: User error (bad option value)
- 2: Config error (unreadable or invalid config file)
- 3: Scan error (root unusable, or a fail-fast run aborted)
- 4: Partial (results printed, but some repositories failed to resolve)
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for CLI runs."""

    OK = 0
    USER_ERROR = 1
    CONFIG_ERROR = 2
    SCAN_ERROR = 3
    PARTIAL = 4

    def __str__(self) -> str:
        return self.name.lower().replace("_", " ")

    @property
    def is_success(self) -> bool:
        return self == ErrorCode.OK

    @property
    def is_error(self) -> bool:
        return self != ErrorCode.OK
