"""
env_bootstrap.provisioner — Root stack provisioning for a new environment.

Sequence (strictly ordered, no retries):
    1. Candidate stack name: amplify-<project>-<env>-<Hmmss>, normalized.
    2. Coordinator registers app + backend environment; its stack name wins.
    3. Build create_stack params (named-IAM + auto-expand capabilities,
       DeploymentBucketName / AuthRoleName / UnauthRoleName parameters).
    4. Create the stack and wait for CREATE_COMPLETE.
    5. Merge outputs into provider metadata.

Any failure in step 4 is logged and re-raised unchanged; the input context is
never modified.
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Any, Protocol

from aws_lambda_powertools import Logger
from botocore.exceptions import ClientError, WaiterError

from env_bootstrap.coordinator import AppCoordinator
from env_bootstrap.exceptions import ConfigurationError, StackCreationError
from env_bootstrap.metadata import merge_stack_outputs
from env_bootstrap.models import (
    ROOT_STACK_CAPABILITIES,
    ExecutionContext,
    StackOutputs,
    StackProvisionParams,
    parse_stack_outputs,
)
from env_bootstrap.stack_name import build_candidate_stack_name

logger = Logger(service="env-bootstrap")

ROOT_STACK_TEMPLATE = Path(__file__).resolve().parent / "templates" / "root-stack-template.json"

AUTH_ROLE_SUFFIX = "-authRole"
UNAUTH_ROLE_SUFFIX = "-unauthRole"


class StackService(Protocol):
    def create_stack(self, params: StackProvisionParams) -> StackOutputs: ...


class CloudFormationStackService:
    """Creates a stack and blocks until it reaches a terminal state."""

    def __init__(
        self,
        cloudformation_client: Any,
        *,
        wait_delay: int = 15,
        wait_max_attempts: int = 120,
    ) -> None:
        self._cfn = cloudformation_client
        self._wait_delay = wait_delay
        self._wait_max_attempts = wait_max_attempts

    def _last_status(self, stack_name: str) -> str:
        try:
            response = self._cfn.describe_stacks(StackName=stack_name)
        except ClientError:
            logger.exception("Could not describe failed stack", stack_name=stack_name)
            return ""
        stacks = response.get("Stacks", [])
        return str(stacks[0].get("StackStatus", "")) if stacks else ""

    def create_stack(self, params: StackProvisionParams) -> StackOutputs:
        self._cfn.create_stack(**params.as_request())
        logger.info("Waiting for stack creation", stack_name=params.stack_name)

        waiter = self._cfn.get_waiter("stack_create_complete")
        try:
            waiter.wait(
                StackName=params.stack_name,
                WaiterConfig={"Delay": self._wait_delay, "MaxAttempts": self._wait_max_attempts},
            )
        except WaiterError as exc:
            raise StackCreationError(
                stack_name=params.stack_name,
                status=self._last_status(params.stack_name),
            ) from exc

        return parse_stack_outputs(self._cfn.describe_stacks(StackName=params.stack_name))


def build_provision_params(
    *,
    stack_name: str,
    deployment_bucket_name: str,
    template_body: str,
) -> StackProvisionParams:
    return StackProvisionParams(
        stack_name=stack_name,
        capabilities=ROOT_STACK_CAPABILITIES,
        template_body=template_body,
        parameters=(
            ("DeploymentBucketName", deployment_bucket_name),
            ("AuthRoleName", f"{stack_name}{AUTH_ROLE_SUFFIX}"),
            ("UnauthRoleName", f"{stack_name}{UNAUTH_ROLE_SUFFIX}"),
        ),
    )


def provision_root_stack(
    ctx: ExecutionContext,
    *,
    coordinator: AppCoordinator,
    stack_service: StackService,
    template_path: Path = ROOT_STACK_TEMPLATE,
    now: datetime | None = None,
) -> ExecutionContext:
    """Create the root stack for a new environment and return the merged context."""
    exe_info = ctx.exe_info
    if exe_info is None:
        raise ConfigurationError(
            "A project configuration is required to provision a new environment"
        )

    project_name = exe_info.project_config.project_name
    env_name = exe_info.local_env_info.env_name
    candidate = build_candidate_stack_name(project_name, env_name, now or datetime.now())

    identity = coordinator.init(project_name, env_name, candidate)
    params = build_provision_params(
        stack_name=identity.stack_name,
        deployment_bucket_name=identity.deployment_bucket_name,
        template_body=template_path.read_text(encoding="utf-8"),
    )

    logger.info(
        "Initializing project in the cloud",
        stack_name=params.stack_name,
        env_name=env_name,
    )
    try:
        outputs = stack_service.create_stack(params)
    except Exception:
        logger.exception("Root stack creation failed", stack_name=params.stack_name)
        raise

    merged = merge_stack_outputs(ctx, outputs, identity.app_id)
    logger.info(
        "Successfully created initial AWS cloud resources for deployments.",
        stack_name=params.stack_name,
    )
    return merged
