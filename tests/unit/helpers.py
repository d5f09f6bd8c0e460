"""Test doubles shared by env_bootstrap unit tests."""

from __future__ import annotations

from typing import BinaryIO

REGION = "eu-west-2"


class RecordingStore:
    """ObjectStore double that keeps uploaded bytes in order."""

    def __init__(self, *, fail_on: set[str] | None = None) -> None:
        self.calls: list[tuple[str, bytes]] = []
        self._fail_on = fail_on or set()

    @property
    def keys(self) -> list[str]:
        return [key for key, _ in self.calls]

    def put(self, key: str, body: BinaryIO) -> None:
        if key in self._fail_on:
            raise RuntimeError(f"upload failed: {key}")
        self.calls.append((key, body.read()))
