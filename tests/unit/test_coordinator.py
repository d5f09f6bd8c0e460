"""Unit tests for env_bootstrap.coordinator."""

from __future__ import annotations

from typing import Any
from unittest.mock import MagicMock

from env_bootstrap.coordinator import (
    AmplifyAppCoordinator,
    deployment_bucket_for,
    recorded_app_id,
)
from env_bootstrap.models import AMPLIFY_APP_ID_LABEL, PROVIDER_NAME


def _amplify(*pages: dict) -> MagicMock:
    client = MagicMock()
    client.list_apps.return_value = {"apps": []}
    client.create_app.return_value = {"app": {"appId": "d1abc"}}
    client.list_backend_environments.side_effect = list(pages) or [{"backendEnvironments": []}]
    return client


def test_new_environment_is_registered() -> None:
    client = _amplify({"backendEnvironments": []})

    identity = AmplifyAppCoordinator(client).init("demo", "dev", "amplify-demo-dev-93005")

    assert identity.app_id == "d1abc"
    assert identity.stack_name == "amplify-demo-dev-93005"
    assert identity.deployment_bucket_name == "amplify-demo-dev-93005-deployment"
    client.create_app.assert_called_once_with(name="demo")
    client.create_backend_environment.assert_called_once_with(
        appId="d1abc",
        environmentName="dev",
        stackName="amplify-demo-dev-93005",
        deploymentArtifacts="amplify-demo-dev-93005-deployment",
    )


def test_existing_environment_revises_stack_name() -> None:
    client = _amplify(
        {
            "backendEnvironments": [{"environmentName": "prod", "stackName": "x"}],
            "nextToken": "page-2",
        },
        {
            "backendEnvironments": [
                {
                    "environmentName": "dev",
                    "stackName": "amplify-demo-dev-11111",
                    "deploymentArtifacts": "amplify-demo-dev-11111-deployment",
                }
            ]
        },
    )

    identity = AmplifyAppCoordinator(client).init("demo", "dev", "amplify-demo-dev-93005")

    assert identity.stack_name == "amplify-demo-dev-11111"
    assert identity.deployment_bucket_name == "amplify-demo-dev-11111-deployment"
    client.create_backend_environment.assert_not_called()
    assert client.list_backend_environments.call_args_list[1].kwargs == {
        "appId": "d1abc",
        "nextToken": "page-2",
    }


def test_existing_environment_without_artifacts_uses_default_bucket() -> None:
    client = _amplify(
        {"backendEnvironments": [{"environmentName": "dev", "stackName": "amplify-demo-dev-1"}]}
    )

    identity = AmplifyAppCoordinator(client).init("demo", "dev", "amplify-demo-dev-2")

    assert identity.deployment_bucket_name == deployment_bucket_for("amplify-demo-dev-1")


class _FakeAmplify:
    """In-memory Amplify control plane: apps and their backend environments."""

    def __init__(self) -> None:
        self.apps: dict[str, dict[str, Any]] = {}
        self.backend_environments: dict[str, list[dict[str, Any]]] = {}

    def create_app(self, *, name: str) -> dict[str, Any]:
        app = {"appId": f"app{len(self.apps) + 1}", "name": name}
        self.apps[app["appId"]] = app
        self.backend_environments[app["appId"]] = []
        return {"app": app}

    def list_apps(self, **kwargs: Any) -> dict[str, Any]:
        return {"apps": list(self.apps.values())}

    def list_backend_environments(self, *, appId: str, **kwargs: Any) -> dict[str, Any]:
        return {"backendEnvironments": list(self.backend_environments[appId])}

    def create_backend_environment(self, *, appId: str, **fields: Any) -> dict[str, Any]:
        self.backend_environments[appId].append(dict(fields))
        return {"backendEnvironment": fields}


def test_rerun_reuses_app_and_bound_stack() -> None:
    amplify = _FakeAmplify()

    first = AmplifyAppCoordinator(amplify).init("demo", "dev", "amplify-demo-dev-1")
    second = AmplifyAppCoordinator(amplify).init("demo", "dev", "amplify-demo-dev-2")

    assert len(amplify.apps) == 1
    assert second.app_id == first.app_id
    assert second.stack_name == "amplify-demo-dev-1"
    assert second.deployment_bucket_name == "amplify-demo-dev-1-deployment"
    assert len(amplify.backend_environments[first.app_id]) == 1


def test_environments_of_one_project_share_app() -> None:
    amplify = _FakeAmplify()

    dev = AmplifyAppCoordinator(amplify).init("demo", "dev", "amplify-demo-dev-1")
    prod = AmplifyAppCoordinator(amplify).init("demo", "prod", "amplify-demo-prod-1")
    other = AmplifyAppCoordinator(amplify).init("other", "dev", "amplify-other-dev-1")

    assert prod.app_id == dev.app_id
    assert other.app_id != dev.app_id
    assert len(amplify.backend_environments[dev.app_id]) == 2


def test_app_lookup_follows_next_token() -> None:
    client = _amplify({"backendEnvironments": []})
    client.list_apps.side_effect = [
        {"apps": [{"appId": "a0", "name": "other"}], "nextToken": "p2"},
        {"apps": [{"appId": "a9", "name": "demo"}]},
    ]

    identity = AmplifyAppCoordinator(client).init("demo", "dev", "amplify-demo-dev-1")

    assert identity.app_id == "a9"
    client.create_app.assert_not_called()
    assert client.list_apps.call_args_list[1].kwargs == {"nextToken": "p2"}


def test_recorded_app_id_skips_lookup() -> None:
    client = _amplify({"backendEnvironments": []})

    coordinator = AmplifyAppCoordinator(client, app_id="d1rec")

    identity = coordinator.init("demo", "qa", "amplify-demo-qa-1")

    assert identity.app_id == "d1rec"
    client.list_apps.assert_not_called()
    client.create_app.assert_not_called()
    assert client.create_backend_environment.call_args.kwargs["appId"] == "d1rec"


def test_recorded_app_id_reads_any_environment() -> None:
    tpi = {
        "dev": {PROVIDER_NAME: {"StackName": "s"}},
        "prod": {PROVIDER_NAME: {AMPLIFY_APP_ID_LABEL: "d1rec"}},
    }

    assert recorded_app_id(tpi) == "d1rec"
    assert recorded_app_id({"dev": {PROVIDER_NAME: {}}}) is None
    assert recorded_app_id({}) is None
