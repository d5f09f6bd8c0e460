"""
env_bootstrap.uploads — Object store and ordered artifact uploads.

Uploads run one at a time in list order.  A task whose local file is absent
is skipped without error; the first failed upload stops the sequence and
propagates.  Files uploaded before the failure stay uploaded.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any, BinaryIO

from aws_lambda_powertools import Logger

from env_bootstrap.exceptions import ConfigurationError
from env_bootstrap.models import (
    AMPLIFY_META_FILENAME,
    BACKEND_CONFIG_FILENAME,
    DEPLOYMENT_BUCKET_LABEL,
    ExecutionContext,
    ObjectStore,
    UploadTask,
)

logger = Logger(service="env-bootstrap")

ARTIFACT_FILENAMES: tuple[str, ...] = (AMPLIFY_META_FILENAME, BACKEND_CONFIG_FILENAME)


class S3ObjectStore:
    """ObjectStore writing into a single S3 bucket."""

    def __init__(self, s3_client: Any, bucket: str) -> None:
        self._s3 = s3_client
        self.bucket = bucket

    @classmethod
    def for_context(cls, ctx: ExecutionContext, s3_client: Any) -> S3ObjectStore:
        """Target the deployment bucket recorded in this run's provider metadata."""
        meta = ctx.exe_info.provider_meta() if ctx.exe_info is not None else {}
        bucket = meta.get(DEPLOYMENT_BUCKET_LABEL)
        if not bucket:
            raise ConfigurationError(
                f"{DEPLOYMENT_BUCKET_LABEL} missing from provider metadata; "
                "the root stack must be provisioned first"
            )
        return cls(s3_client, str(bucket))

    def put(self, key: str, body: BinaryIO) -> None:
        self._s3.upload_fileobj(body, self.bucket, key)
        logger.info("Uploaded object", bucket=self.bucket, key=key)


def upload_in_order(store: ObjectStore, tasks: Iterable[UploadTask]) -> list[str]:
    """Upload each present file in order; return the keys that were uploaded."""
    uploaded: list[str] = []
    for task in tasks:
        if not task.local_path.exists():
            continue
        with task.local_path.open("rb") as body:
            store.put(task.key, body)
        uploaded.append(task.key)
    return uploaded


def artifact_tasks(ctx: ExecutionContext) -> list[UploadTask]:
    source_dir = ctx.paths.current_cloud_backend_dir
    return [UploadTask(local_path=source_dir / name, key=name) for name in ARTIFACT_FILENAMES]


def store_artifacts(ctx: ExecutionContext, *, store: ObjectStore) -> list[str]:
    """Upload amplify-meta.json then backend-config.json from the current cloud backend."""
    return upload_in_order(store, artifact_tasks(ctx))
