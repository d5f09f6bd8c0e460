"""
env_bootstrap.snapshot — Archive and upload the current cloud backend.

The archive is built in <backend>/.temp, fully written and closed, and only
then uploaded under its file name.  The scratch directory is removed on every
exit path, including failed compression or upload; a removal failure is
logged as a warning and never masks the snapshot outcome.

Concurrent snapshots over the same backend directory are not supported.
"""

from __future__ import annotations

import os
import shutil
import zipfile
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from aws_lambda_powertools import Logger

from env_bootstrap.exceptions import SnapshotError
from env_bootstrap.models import (
    AMPLIFY_DIR_NAME,
    CURRENT_CLOUD_BACKEND_DIR_NAME,
    SCRATCH_DIR_NAME,
    SNAPSHOT_FILENAME,
    ExecutionContext,
    ObjectStore,
)

logger = Logger(service="env-bootstrap")


@contextmanager
def scratch_directory(backend_dir: Path) -> Iterator[Path]:
    scratch = backend_dir / SCRATCH_DIR_NAME
    scratch.mkdir(parents=True, exist_ok=True)
    try:
        yield scratch
    finally:
        try:
            shutil.rmtree(scratch)
        except OSError:
            logger.warning("Could not remove scratch directory", scratch_dir=str(scratch))


def create_archive(source_dir: Path, archive_path: Path) -> Path:
    """Zip the contents of source_dir (paths relative to it) into archive_path."""
    if not source_dir.is_dir():
        raise SnapshotError(f"Current cloud backend not found: {source_dir}")

    with zipfile.ZipFile(archive_path, "w", compression=zipfile.ZIP_DEFLATED) as archive:
        for root, dirs, files in os.walk(source_dir):
            dirs.sort()
            for name in sorted(files):
                file_path = Path(root) / name
                archive.write(file_path, file_path.relative_to(source_dir).as_posix())
    return archive_path


def current_cloud_backend_dir(ctx: ExecutionContext) -> Path:
    """Prefer the init run's own project path over the generic path resolver."""
    if ctx.exe_info is not None:
        project_path = ctx.exe_info.local_env_info.project_path
        return project_path / AMPLIFY_DIR_NAME / CURRENT_CLOUD_BACKEND_DIR_NAME
    return ctx.paths.current_cloud_backend_dir


def store_current_cloud_backend(ctx: ExecutionContext, *, store: ObjectStore) -> ExecutionContext:
    source_dir = current_cloud_backend_dir(ctx)
    logger.info("Storing current cloud backend snapshot", source_dir=str(source_dir))

    with scratch_directory(ctx.paths.backend_dir) as scratch:
        archive_path = create_archive(source_dir, scratch / SNAPSHOT_FILENAME)
        with archive_path.open("rb") as body:
            store.put(archive_path.name, body)

    logger.info("Stored current cloud backend snapshot", key=SNAPSHOT_FILENAME)
    return ctx
