"""
env_bootstrap.coordinator — App and deployment-bucket registration.

Before the root stack is created, the project is registered as an AWS Amplify
app and the environment as one of its backend environments.  An existing app is
reused (the recorded app id, else an app named after the project); a new app
is created only when neither is found.  The coordinator may revise the
candidate stack name (an environment that is already bound keeps its
recorded stack); callers must use the returned stack name.
"""

from __future__ import annotations

from typing import Any, Protocol

from aws_lambda_powertools import Logger

from env_bootstrap.models import AMPLIFY_APP_ID_LABEL, PROVIDER_NAME, AppIdentity

logger = Logger(service="env-bootstrap")

DEPLOYMENT_BUCKET_SUFFIX = "-deployment"


class AppCoordinator(Protocol):
    def init(self, project_name: str, env_name: str, stack_name: str) -> AppIdentity: ...


def deployment_bucket_for(stack_name: str) -> str:
    return f"{stack_name}{DEPLOYMENT_BUCKET_SUFFIX}"


class AmplifyAppCoordinator:
    """AppCoordinator backed by the Amplify control-plane API."""

    def __init__(self, amplify_client: Any, *, app_id: str | None = None) -> None:
        self._amplify = amplify_client
        self._app_id = app_id

    def _find_app_id(self, project_name: str) -> str | None:
        kwargs: dict[str, Any] = {}
        while True:
            response = self._amplify.list_apps(**kwargs)
            for app in response.get("apps", []):
                if app.get("name") == project_name:
                    return str(app["appId"])
            next_token = response.get("nextToken")
            if not next_token:
                return None
            kwargs["nextToken"] = next_token

    def _resolve_app_id(self, project_name: str) -> str:
        """Recorded app id first, then an app named after the project, else a new app."""
        if self._app_id:
            return self._app_id
        app_id = self._find_app_id(project_name)
        if app_id is None:
            app_id = str(self._amplify.create_app(name=project_name)["app"]["appId"])
            logger.info("Created Amplify app", app_id=app_id, project_name=project_name)
        self._app_id = app_id
        return app_id

    def _find_backend_environment(self, app_id: str, env_name: str) -> dict[str, Any] | None:
        kwargs: dict[str, Any] = {"appId": app_id}
        while True:
            response = self._amplify.list_backend_environments(**kwargs)
            for item in response.get("backendEnvironments", []):
                if item.get("environmentName") == env_name:
                    return item
            next_token = response.get("nextToken")
            if not next_token:
                return None
            kwargs["nextToken"] = next_token

    def init(self, project_name: str, env_name: str, stack_name: str) -> AppIdentity:
        app_id = self._resolve_app_id(project_name)

        existing = self._find_backend_environment(app_id, env_name)
        if existing is not None:
            verified_stack_name = str(existing["stackName"])
            bucket = str(
                existing.get("deploymentArtifacts") or deployment_bucket_for(verified_stack_name)
            )
            logger.info(
                "Backend environment already registered",
                app_id=app_id,
                env_name=env_name,
                stack_name=verified_stack_name,
            )
            return AppIdentity(
                app_id=app_id,
                stack_name=verified_stack_name,
                deployment_bucket_name=bucket,
            )

        bucket = deployment_bucket_for(stack_name)
        self._amplify.create_backend_environment(
            appId=app_id,
            environmentName=env_name,
            stackName=stack_name,
            deploymentArtifacts=bucket,
        )
        return AppIdentity(app_id=app_id, stack_name=stack_name, deployment_bucket_name=bucket)


def recorded_app_id(team_provider_info: dict[str, Any]) -> str | None:
    """Return the app id already recorded for any environment of the project."""
    for env_entry in team_provider_info.values():
        if not isinstance(env_entry, dict):
            continue
        app_id = env_entry.get(PROVIDER_NAME, {}).get(AMPLIFY_APP_ID_LABEL)
        if app_id:
            return str(app_id)
    return None
