"""
env_bootstrap.project_files — JSON project documents.

The bootstrap core only reads these; the init caller persists them between
provisioning and the post-success snapshot:

    amplify/team-provider-info.json                     durable per-env metadata
    amplify/backend/amplify-meta.json                   provider metadata
    amplify/#current-cloud-backend/amplify-meta.json    copy uploaded with the snapshot
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from env_bootstrap.exceptions import ConfigurationError
from env_bootstrap.models import AMPLIFY_META_FILENAME, ExecutionContext


def load_json_document(path: Path) -> dict[str, Any]:
    """Read a JSON object from path; a missing file reads as {}."""
    if not path.exists():
        return {}
    parsed = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(parsed, dict):
        raise ConfigurationError(f"Expected a JSON object in {path}")
    return parsed


def write_json_document(path: Path, document: dict[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(document, indent=2, sort_keys=True) + "\n", encoding="utf-8")


def persist_init_records(ctx: ExecutionContext) -> list[Path]:
    """Write team-provider-info and amplify-meta for a completed init run."""
    exe_info = ctx.exe_info
    if exe_info is None:
        raise ConfigurationError("No init run to persist")

    written = [ctx.paths.team_provider_info_path]
    write_json_document(ctx.paths.team_provider_info_path, exe_info.team_provider_info)
    for directory in (ctx.paths.backend_dir, ctx.paths.current_cloud_backend_dir):
        meta_path = directory / AMPLIFY_META_FILENAME
        write_json_document(meta_path, exe_info.amplify_meta)
        written.append(meta_path)
    return written
