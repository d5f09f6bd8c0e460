"""
env_bootstrap.metadata — Merge root stack outputs into provider metadata.

The merged record is written to two stores:
  - amplify_meta (ephemeral): always; reset first so that metadata left by
    any other provider earlier in the same run is discarded.
  - team_provider_info (durable): only for a new environment, keyed by
    environment name.

Both copies are equal at write time and share no mutable objects.
"""

from __future__ import annotations

import copy
from dataclasses import replace
from typing import Any

from env_bootstrap.exceptions import ConfigurationError
from env_bootstrap.models import (
    AMPLIFY_APP_ID_LABEL,
    PROVIDER_NAME,
    ExecutionContext,
    StackOutputs,
)


def build_provider_meta(outputs: StackOutputs, app_id: str) -> dict[str, Any]:
    meta: dict[str, Any] = {output.key: output.value for output in outputs}
    meta[AMPLIFY_APP_ID_LABEL] = app_id
    return meta


def merge_stack_outputs(
    ctx: ExecutionContext,
    outputs: StackOutputs,
    app_id: str,
) -> ExecutionContext:
    """Return a new context carrying the provider metadata for this stack."""
    exe_info = ctx.exe_info
    if exe_info is None:
        raise ConfigurationError("Cannot merge stack outputs without an init run in progress")

    meta = build_provider_meta(outputs, app_id)
    amplify_meta = {"providers": {PROVIDER_NAME: meta}}

    team_provider_info = copy.deepcopy(exe_info.team_provider_info)
    if exe_info.is_new_env:
        env_name = exe_info.local_env_info.env_name
        env_entry = team_provider_info.setdefault(env_name, {})
        env_entry[PROVIDER_NAME] = copy.deepcopy(meta)

    return replace(
        ctx,
        exe_info=replace(
            exe_info,
            amplify_meta=amplify_meta,
            team_provider_info=team_provider_info,
        ),
    )
