"""
env_bootstrap.stack_name — Root stack naming.

normalize_stack_name() maps any string onto the CloudFormation-safe grammar
^[a-z][-a-z0-9]*$.  It never fails and is idempotent.
"""

from __future__ import annotations

import re
from datetime import datetime

_DISALLOWED = re.compile(r"[^-a-z0-9]")


def normalize_stack_name(name: str) -> str:
    """Lower-case, strip characters outside [-a-z0-9], and force a leading letter."""
    result = _DISALLOWED.sub("", name.lower())
    if not result or not result[0].isalpha():
        result = f"a{result}"
    return result


def time_token(now: datetime) -> str:
    """Hour (unpadded) + minutes + seconds, e.g. 9:30:05 -> '93005'."""
    return f"{now.hour}{now:%M%S}"


def build_candidate_stack_name(project_name: str, env_name: str, now: datetime) -> str:
    return normalize_stack_name(f"amplify-{project_name}-{env_name}-{time_token(now)}")
