"""
env_bootstrap — Cloud environment bootstrap and backend snapshot sync.

For a new environment: create the root CloudFormation stack, record its
outputs as provider metadata, and after the caller has persisted its records,
upload a snapshot of the current cloud backend plus its metadata documents to
the deployment bucket.
"""

from env_bootstrap.config import Settings, load_settings
from env_bootstrap.exceptions import (
    BootstrapError,
    ConfigurationError,
    SnapshotError,
    StackCreationError,
)
from env_bootstrap.models import (
    ExecutionContext,
    ExeInfo,
    LocalEnvInfo,
    ProjectConfig,
    ProjectPaths,
)
from env_bootstrap.orchestrator import needs_bootstrap, on_init_successful, run
from env_bootstrap.stack_name import normalize_stack_name

__all__ = [
    "BootstrapError",
    "ConfigurationError",
    "ExeInfo",
    "ExecutionContext",
    "LocalEnvInfo",
    "ProjectConfig",
    "ProjectPaths",
    "Settings",
    "SnapshotError",
    "StackCreationError",
    "load_settings",
    "needs_bootstrap",
    "normalize_stack_name",
    "on_init_successful",
    "run",
]
