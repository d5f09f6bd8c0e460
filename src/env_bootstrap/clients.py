"""
env_bootstrap.clients — boto3 client factories.

Every client shares one boto3 Session (optionally profile-scoped) and one
botocore Config carrying the configured timeouts and attempt limit.  When
LOCALSTACK_ENDPOINT is set, requests are routed there instead of AWS.
"""

from __future__ import annotations

from typing import Any

import boto3
from botocore.config import Config

from env_bootstrap.config import Settings


def client_config(settings: Settings) -> Config:
    return Config(
        region_name=settings.aws_region,
        connect_timeout=settings.connect_timeout,
        read_timeout=settings.read_timeout,
        retries={"max_attempts": settings.max_attempts, "mode": "standard"},
    )


def make_session(settings: Settings) -> boto3.session.Session:
    return boto3.session.Session(
        profile_name=settings.aws_profile,
        region_name=settings.aws_region,
    )


def make_client(service_name: str, settings: Settings, *, session: Any = None) -> Any:
    """Create a boto3 client for ``service_name`` using the configured timeouts."""
    session = session or make_session(settings)
    return session.client(
        service_name,
        config=client_config(settings),
        endpoint_url=settings.endpoint_url,
    )
