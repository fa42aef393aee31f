"""Lightweight settings structures consumed by the application layer."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class SystemInfo:
    """Subset of configuration surfaced by the /info endpoint."""

    title: str
    description: str
    version: str
    environment: str
    git_commit: str
    build_time: str
    history_url: str
    cache_backend: str
    redis_url: str
