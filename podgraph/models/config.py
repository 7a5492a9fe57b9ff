"""Pipeline configuration."""

import os

from pydantic import BaseModel, Field


def _default_concurrency() -> int:
    return os.cpu_count() or 1


class PodgraphConfig(BaseModel):
    """Configuration for a single ingest → graph → render run."""

    cache_path: str = "cache.json"
    output_path: str = "graph.dot"
    max_concurrency: int = Field(default_factory=_default_concurrency, ge=1)
    lookup_base_url: str = "https://api.scryfall.com"
    lookup_timeout_seconds: float = Field(default=30.0, gt=0)
    policy: str = "birthing-pod"
