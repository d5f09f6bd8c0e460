"""
init_env.py — Initialize a project environment in the cloud.

Ordered steps:
    1. provision       — create the root stack (new environments only)
    2. persist         — write team-provider-info.json and amplify-meta.json
    3. snapshot        — upload the current cloud backend archive and metadata

An environment already present in amplify/team-provider-info.json is left
untouched.

Usage:
    uv run python scripts/init_env.py --project-name <name> --env <env> [--project-path <dir>]
"""

from __future__ import annotations

import argparse
import logging
from datetime import datetime
from pathlib import Path

from env_bootstrap.clients import make_client, make_session
from env_bootstrap.config import Settings, load_settings
from env_bootstrap.coordinator import AmplifyAppCoordinator, recorded_app_id
from env_bootstrap.models import (
    ExecutionContext,
    ExeInfo,
    LocalEnvInfo,
    ProjectConfig,
    ProjectPaths,
)
from env_bootstrap.orchestrator import needs_bootstrap, on_init_successful, run
from env_bootstrap.project_files import load_json_document, persist_init_records
from env_bootstrap.provisioner import CloudFormationStackService
from env_bootstrap.uploads import S3ObjectStore

logger = logging.getLogger("init_env")
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)


def build_context(project_name: str, env_name: str, project_path: Path) -> ExecutionContext:
    """Create the init context; the env is new when team-provider-info has no entry for it."""
    project_path = project_path.resolve()
    paths = ProjectPaths(project_root=project_path)
    team_provider_info = load_json_document(paths.team_provider_info_path)

    return ExecutionContext(
        paths=paths,
        exe_info=ExeInfo(
            project_config=ProjectConfig(project_name=project_name),
            local_env_info=LocalEnvInfo(env_name=env_name, project_path=project_path),
            is_new_env=env_name not in team_provider_info,
            team_provider_info=team_provider_info,
        ),
    )


def run_init(
    ctx: ExecutionContext,
    settings: Settings,
    *,
    now: datetime | None = None,
) -> ExecutionContext:
    """Run provision -> persist -> snapshot for a new environment."""
    if not needs_bootstrap(ctx):
        logger.info("Environment already initialized; nothing to do")
        return ctx

    session = make_session(settings)
    coordinator = AmplifyAppCoordinator(
        make_client("amplify", settings, session=session),
        app_id=recorded_app_id(ctx.exe_info.team_provider_info) if ctx.exe_info else None,
    )
    stack_service = CloudFormationStackService(
        make_client("cloudformation", settings, session=session),
        wait_delay=settings.stack_wait_delay,
        wait_max_attempts=settings.stack_wait_max_attempts,
    )

    logger.info("==> Step: provision")
    ctx = run(ctx, coordinator=coordinator, stack_service=stack_service, now=now)

    logger.info("==> Step: persist")
    for path in persist_init_records(ctx):
        logger.info("Wrote %s", path)

    logger.info("==> Step: snapshot")
    store = S3ObjectStore.for_context(ctx, make_client("s3", settings, session=session))
    return on_init_successful(ctx, store=store)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments."""
    parser = argparse.ArgumentParser(description="Initialize a project environment in the cloud")
    parser.add_argument("--project-name", required=True, help="Project name")
    parser.add_argument("--env", required=True, help="Environment name, e.g. dev")
    parser.add_argument(
        "--project-path",
        type=Path,
        default=Path.cwd(),
        help="Project root directory (default: current directory)",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint."""
    args = parse_args(argv)
    try:
        settings = load_settings()
        ctx = build_context(args.project_name, args.env, args.project_path)
        run_init(ctx, settings)
    except Exception as exc:
        logger.error("Bootstrap failed: %s", exc)
        return 1

    logger.info("Environment %s initialized", args.env)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
