"""
env_bootstrap.models — Execution context and provisioning records.

Every model is a frozen dataclass.  Pipeline stages never mutate a context in
place: each stage returns a new ExecutionContext built with
dataclasses.replace(), and metadata dicts handed to a new context are fresh
copies.

Metadata stores carried on ExeInfo:
    amplify_meta        — ephemeral, per-run:  {"providers": {provider: {...}}}
    team_provider_info  — durable, per-env:    {env_name: {provider: {...}}}
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, BinaryIO, Protocol

# ---------------------------------------------------------------------------
# Fixed labels
# ---------------------------------------------------------------------------

PROVIDER_NAME = "awscloudformation"
AMPLIFY_APP_ID_LABEL = "AmplifyAppId"
DEPLOYMENT_BUCKET_LABEL = "DeploymentBucketName"

ROOT_STACK_CAPABILITIES: tuple[str, ...] = ("CAPABILITY_NAMED_IAM", "CAPABILITY_AUTO_EXPAND")

AMPLIFY_DIR_NAME = "amplify"
BACKEND_DIR_NAME = "backend"
CURRENT_CLOUD_BACKEND_DIR_NAME = "#current-cloud-backend"
TEAM_PROVIDER_INFO_FILENAME = "team-provider-info.json"
AMPLIFY_META_FILENAME = "amplify-meta.json"
BACKEND_CONFIG_FILENAME = "backend-config.json"

SNAPSHOT_FILENAME = "#current-cloud-backend.zip"
SCRATCH_DIR_NAME = ".temp"


# ---------------------------------------------------------------------------
# Project layout
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ProjectPaths:
    """Resolves the well-known directories of a project rooted at ``project_root``."""

    project_root: Path

    @property
    def amplify_dir(self) -> Path:
        return self.project_root / AMPLIFY_DIR_NAME

    @property
    def backend_dir(self) -> Path:
        return self.amplify_dir / BACKEND_DIR_NAME

    @property
    def current_cloud_backend_dir(self) -> Path:
        return self.amplify_dir / CURRENT_CLOUD_BACKEND_DIR_NAME

    @property
    def team_provider_info_path(self) -> Path:
        return self.amplify_dir / TEAM_PROVIDER_INFO_FILENAME


# ---------------------------------------------------------------------------
# Execution context
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ProjectConfig:
    project_name: str


@dataclass(frozen=True)
class LocalEnvInfo:
    env_name: str
    project_path: Path


@dataclass(frozen=True)
class ExeInfo:
    """Per-invocation state for an init run.

    is_new_env is True when the environment has no entry in the durable
    team-provider-info table yet.
    """

    project_config: ProjectConfig
    local_env_info: LocalEnvInfo
    is_new_env: bool
    amplify_meta: dict[str, Any] = field(default_factory=dict)
    team_provider_info: dict[str, Any] = field(default_factory=dict)

    def provider_meta(self) -> dict[str, Any]:
        """Return a copy of this run's provider metadata (empty if not provisioned)."""
        providers = self.amplify_meta.get("providers", {})
        return copy.deepcopy(providers.get(PROVIDER_NAME, {}))


@dataclass(frozen=True)
class ExecutionContext:
    """Context threaded through the bootstrap stages.

    exe_info is None when no init run is in progress; paths is the generic
    project path resolver used whenever exe_info does not supply a path.
    """

    paths: ProjectPaths
    exe_info: ExeInfo | None = None


# ---------------------------------------------------------------------------
# Provisioning
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class StackProvisionParams:
    """Arguments for a single CloudFormation create_stack call."""

    stack_name: str
    capabilities: tuple[str, ...]
    template_body: str
    parameters: tuple[tuple[str, str], ...]

    def as_request(self) -> dict[str, Any]:
        return {
            "StackName": self.stack_name,
            "Capabilities": list(self.capabilities),
            "TemplateBody": self.template_body,
            "Parameters": [
                {"ParameterKey": key, "ParameterValue": value} for key, value in self.parameters
            ],
        }


@dataclass(frozen=True)
class StackOutput:
    key: str
    value: str


StackOutputs = tuple[StackOutput, ...]


def parse_stack_outputs(stack_description: dict[str, Any]) -> StackOutputs:
    """Extract ordered outputs from a describe_stacks response."""
    stacks = stack_description.get("Stacks", [])
    if not stacks:
        return ()
    return tuple(
        StackOutput(key=str(item["OutputKey"]), value=str(item["OutputValue"]))
        for item in stacks[0].get("Outputs", [])
    )


@dataclass(frozen=True)
class AppIdentity:
    """Result of registering the app/backend environment with the coordinator."""

    app_id: str
    stack_name: str
    deployment_bucket_name: str


# ---------------------------------------------------------------------------
# Uploads
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class UploadTask:
    local_path: Path
    key: str


class ObjectStore(Protocol):
    """Write-only object storage used by the snapshot and artifact uploads."""

    def put(self, key: str, body: BinaryIO) -> None: ...
