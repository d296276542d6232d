"""Configuration helpers for the center search."""

from __future__ import annotations

import copy
from dataclasses import dataclass


@dataclass
class SearchConfig:
    """Default knobs used when callers do not pass explicit values."""

    iterations: int = 12
    max_workers: int = 4
    chunk_size: int = 1_000_000
    cloud_size: int = 10_000_000
    cloud_path: str = "TestCloud.bin"


_SEARCH_CONFIG = SearchConfig()


def get_search_config() -> SearchConfig:
    return copy.deepcopy(_SEARCH_CONFIG)


def set_search_config(config: SearchConfig) -> None:
    global _SEARCH_CONFIG
    if config.iterations < 0:
        raise ValueError(f"iterations must be >= 0, got {config.iterations}")
    for name in ("max_workers", "chunk_size", "cloud_size"):
        if getattr(config, name) < 1:
            raise ValueError(f"{name} must be positive, got {getattr(config, name)}")
    _SEARCH_CONFIG = copy.deepcopy(config)
