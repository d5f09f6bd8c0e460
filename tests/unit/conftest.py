"""Shared fixtures for env_bootstrap unit tests."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest
from env_bootstrap.models import (
    ExecutionContext,
    ExeInfo,
    LocalEnvInfo,
    ProjectConfig,
    ProjectPaths,
)

from tests.unit.helpers import REGION


@pytest.fixture(autouse=True)
def aws_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Minimal AWS env so boto3 never reaches real credentials; moto intercepts calls."""
    monkeypatch.setenv("AWS_REGION", REGION)
    monkeypatch.setenv("AWS_DEFAULT_REGION", REGION)
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    monkeypatch.delenv("AWS_PROFILE", raising=False)
    monkeypatch.delenv("LOCALSTACK_ENDPOINT", raising=False)


@pytest.fixture
def make_ctx(tmp_path: Path) -> Callable[..., ExecutionContext]:
    def _make(
        *,
        project_name: str = "demo",
        env_name: str = "dev",
        is_new_env: bool = True,
        amplify_meta: dict[str, Any] | None = None,
        team_provider_info: dict[str, Any] | None = None,
    ) -> ExecutionContext:
        return ExecutionContext(
            paths=ProjectPaths(project_root=tmp_path),
            exe_info=ExeInfo(
                project_config=ProjectConfig(project_name=project_name),
                local_env_info=LocalEnvInfo(env_name=env_name, project_path=tmp_path),
                is_new_env=is_new_env,
                amplify_meta=amplify_meta or {},
                team_provider_info=team_provider_info or {},
            ),
        )

    return _make
