"""
env_bootstrap.orchestrator — Entry points for an init run.

Two separately invoked transitions:

    run()                 fresh bootstrap: provision the root stack and merge
                          metadata.  No-op when the environment already exists.
    on_init_successful()  post-success hook: snapshot the current cloud backend,
                          then upload amplify-meta.json and backend-config.json.
                          Only for a new environment.

The caller persists its own records between the two.  A provisioning failure
raises out of run(), so the post-success hook is never reached.
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

from env_bootstrap.coordinator import AppCoordinator
from env_bootstrap.models import ExecutionContext, ObjectStore
from env_bootstrap.provisioner import ROOT_STACK_TEMPLATE, StackService, provision_root_stack
from env_bootstrap.snapshot import store_current_cloud_backend
from env_bootstrap.uploads import store_artifacts


def needs_bootstrap(ctx: ExecutionContext) -> bool:
    return ctx.exe_info is None or ctx.exe_info.is_new_env


def run(
    ctx: ExecutionContext,
    *,
    coordinator: AppCoordinator,
    stack_service: StackService,
    template_path: Path = ROOT_STACK_TEMPLATE,
    now: datetime | None = None,
) -> ExecutionContext:
    if not needs_bootstrap(ctx):
        return ctx
    return provision_root_stack(
        ctx,
        coordinator=coordinator,
        stack_service=stack_service,
        template_path=template_path,
        now=now,
    )


def on_init_successful(ctx: ExecutionContext, *, store: ObjectStore) -> ExecutionContext:
    if ctx.exe_info is not None and ctx.exe_info.is_new_env:
        ctx = store_current_cloud_backend(ctx, store=store)
        store_artifacts(ctx, store=store)
    return ctx
