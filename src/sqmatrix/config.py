"""Process settings for the matrix engine.

The worker count for elementwise operations is read once, from the
``SQMATRIX_WORKERS`` environment variable when set and otherwise from the
host-reported CPU count. ``use_settings`` installs an override for the
current context, which is how tests pin the 1-worker and many-worker paths.
"""

from __future__ import annotations

import os
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from functools import lru_cache
from typing import Final

from .errors import ConfigurationError

WORKERS_ENV_VAR: Final[str] = "SQMATRIX_WORKERS"


@dataclass(frozen=True)
class Settings:
    workers: int

    def __post_init__(self) -> None:
        if isinstance(self.workers, bool) or not isinstance(self.workers, int) or self.workers < 1:
            raise ConfigurationError(f"Worker count must be a positive integer, got {self.workers!r}")


_OVERRIDE: ContextVar[Settings | None] = ContextVar("sqmatrix_settings_override", default=None)


def load_settings(environ: Mapping[str, str] | None = None, *, cpu_count: int | None = None) -> Settings:
    env = os.environ if environ is None else environ
    requested = env.get(WORKERS_ENV_VAR, "").strip()
    if requested:
        try:
            workers = int(requested)
        except ValueError:
            raise ConfigurationError(f"{WORKERS_ENV_VAR} must be an integer, got {requested!r}") from None
        return Settings(workers=workers)

    host = os.cpu_count() if cpu_count is None else cpu_count
    if not host:
        raise ConfigurationError("Cannot read the amount of system threads")
    return Settings(workers=host)


@lru_cache(maxsize=1)
def _process_settings() -> Settings:
    return load_settings()


def get_settings() -> Settings:
    override = _OVERRIDE.get()
    if override is not None:
        return override
    return _process_settings()


@contextmanager
def use_settings(settings: Settings) -> Iterator[Settings]:
    token = _OVERRIDE.set(settings)
    try:
        yield settings
    finally:
        _OVERRIDE.reset(token)
