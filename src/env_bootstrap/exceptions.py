"""
env_bootstrap.exceptions — Bootstrap pipeline errors.

Service failures from botocore (ClientError, WaiterError) are never wrapped
on the provisioning call path; they propagate to the caller unchanged.
"""


class BootstrapError(RuntimeError):
    """Base class for env_bootstrap errors."""


class ConfigurationError(BootstrapError):
    """Raised when settings or the execution context are missing or invalid."""


class StackCreationError(BootstrapError):
    """
    Raised when the root stack reaches a terminal state other than CREATE_COMPLETE.

    Attributes:
        stack_name: Name of the stack that failed.
        status:     Last StackStatus reported by CloudFormation (may be empty
                    if the stack could not be described).
    """

    def __init__(self, *, stack_name: str, status: str) -> None:
        self.stack_name = stack_name
        self.status = status
        super().__init__(f"Stack {stack_name!r} did not complete (status={status or 'unknown'})")


class SnapshotError(BootstrapError):
    """Raised when the current cloud backend cannot be archived."""
