"""Environment-driven configuration for the relay."""
from __future__ import annotations
import os
import codecs
import logging
from dataclasses import dataclass
from dotenv import load_dotenv

load_dotenv()

DEFAULT_EXECUTABLE_NAME = "main"
DEFAULT_CHUNK_SIZE = 64 * 1024


def _default_executable() -> str:
    # Lambda unpacks the deployment package into LAMBDA_TASK_ROOT
    root = os.environ.get("LAMBDA_TASK_ROOT") or os.getcwd()
    return os.path.join(root, DEFAULT_EXECUTABLE_NAME)


@dataclass
class Config:
    executable: str
    workdir: str | None
    chunk_size: int
    encoding: str
    log_level: str


def validate_config(cfg: Config) -> Config:
    """Raise ValueError for settings that would only fail once the child is running."""
    if cfg.chunk_size <= 0:
        raise ValueError(f"RELAY_CHUNK_SIZE must be positive, got {cfg.chunk_size}")
    try:
        codecs.lookup(cfg.encoding)
    except LookupError as e:
        raise ValueError(f"Unknown RELAY_ENCODING {cfg.encoding!r}") from e
    if not isinstance(logging.getLevelName(cfg.log_level), int):
        raise ValueError(f"Unknown LOG_LEVEL {cfg.log_level!r}")
    return cfg


def load_config() -> Config:
    """Build a Config from the current environment (and .env, if present)."""
    raw_chunk_size = os.environ.get("RELAY_CHUNK_SIZE", str(DEFAULT_CHUNK_SIZE))
    try:
        chunk_size = int(raw_chunk_size)
    except ValueError as e:
        raise ValueError(f"RELAY_CHUNK_SIZE must be an integer, got {raw_chunk_size!r}") from e
    return validate_config(Config(
        executable=os.environ.get("RELAY_EXECUTABLE") or _default_executable(),
        workdir=os.environ.get("RELAY_WORKDIR") or None,
        chunk_size=chunk_size,
        encoding=os.environ.get("RELAY_ENCODING", "utf-8"),
        log_level=os.environ.get("LOG_LEVEL", "INFO").upper(),
    ))
