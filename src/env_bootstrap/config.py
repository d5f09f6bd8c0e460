"""
env_bootstrap.config — Environment-driven settings.

All values are read from environment variables.  AWS_REGION is required;
everything else has a default.  Network timeouts are explicit here rather
than inherited from botocore defaults.

    AWS_REGION                          required
    AWS_PROFILE                         optional boto3 profile
    LOCALSTACK_ENDPOINT                 optional endpoint override
    BOOTSTRAP_CONNECT_TIMEOUT           seconds, default 10
    BOOTSTRAP_READ_TIMEOUT              seconds, default 60
    BOOTSTRAP_MAX_ATTEMPTS              botocore attempts per call, default 1
    BOOTSTRAP_STACK_WAIT_DELAY          seconds between stack polls, default 15
    BOOTSTRAP_STACK_WAIT_MAX_ATTEMPTS   stack polls before giving up, default 120
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

from env_bootstrap.exceptions import ConfigurationError

DEFAULT_CONNECT_TIMEOUT = 10
DEFAULT_READ_TIMEOUT = 60
DEFAULT_MAX_ATTEMPTS = 1
DEFAULT_STACK_WAIT_DELAY = 15
DEFAULT_STACK_WAIT_MAX_ATTEMPTS = 120


@dataclass(frozen=True)
class Settings:
    aws_region: str
    aws_profile: str | None = None
    endpoint_url: str | None = None
    connect_timeout: int = DEFAULT_CONNECT_TIMEOUT
    read_timeout: int = DEFAULT_READ_TIMEOUT
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    stack_wait_delay: int = DEFAULT_STACK_WAIT_DELAY
    stack_wait_max_attempts: int = DEFAULT_STACK_WAIT_MAX_ATTEMPTS


def _positive_int(environ: Mapping[str, str], name: str, default: int) -> int:
    raw = environ.get(name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from None
    if value <= 0:
        raise ConfigurationError(f"{name} must be positive, got {value}")
    return value


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Build Settings from the process environment.  Fails fast if AWS_REGION is missing."""
    env = os.environ if environ is None else environ

    region = env.get("AWS_REGION", "").strip()
    if not region:
        raise ConfigurationError("AWS_REGION must be set")

    return Settings(
        aws_region=region,
        aws_profile=env.get("AWS_PROFILE", "").strip() or None,
        endpoint_url=env.get("LOCALSTACK_ENDPOINT") or None,
        connect_timeout=_positive_int(env, "BOOTSTRAP_CONNECT_TIMEOUT", DEFAULT_CONNECT_TIMEOUT),
        read_timeout=_positive_int(env, "BOOTSTRAP_READ_TIMEOUT", DEFAULT_READ_TIMEOUT),
        max_attempts=_positive_int(env, "BOOTSTRAP_MAX_ATTEMPTS", DEFAULT_MAX_ATTEMPTS),
        stack_wait_delay=_positive_int(
            env, "BOOTSTRAP_STACK_WAIT_DELAY", DEFAULT_STACK_WAIT_DELAY
        ),
        stack_wait_max_attempts=_positive_int(
            env, "BOOTSTRAP_STACK_WAIT_MAX_ATTEMPTS", DEFAULT_STACK_WAIT_MAX_ATTEMPTS
        ),
    )
