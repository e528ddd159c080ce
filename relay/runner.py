"""Invocation relay: one event in, one child process, one completion out."""
from __future__ import annotations
import time
from . import logger
from .config import Config, load_config, validate_config
from .process import spawn_child, wait_for_exit
from .utils import serialize_event

NON_ZERO_EXIT_MESSAGE = "Process exited with non-zero status code"


class RelayError(Exception):
    """Base class for every failure the relay reports to its caller."""


class ConfigError(RelayError):
    pass


class SerializationError(RelayError):
    pass


class SpawnFailure(RelayError):
    pass


class ProcessFailure(RelayError):
    """Child exited non-zero. The message is fixed; the code is kept for logs."""

    def __init__(self, returncode: int):
        super().__init__(NON_ZERO_EXIT_MESSAGE)
        self.returncode = returncode


class Completion:
    """Single-assignment result slot for one invocation."""

    def __init__(self):
        self._settled = False
        self._error: RelayError | None = None

    @property
    def settled(self) -> bool:
        return self._settled

    @property
    def ok(self) -> bool:
        return self._settled and self._error is None

    @property
    def error(self) -> RelayError | None:
        return self._error

    def _settle(self, error: RelayError | None):
        if self._settled:
            raise RuntimeError("Completion already signalled")
        self._settled = True
        self._error = error

    def succeed(self):
        self._settle(None)

    def fail(self, error: RelayError):
        self._settle(error)

    def __repr__(self):
        if not self._settled:
            return "<Completion pending>"
        return "<Completion ok>" if self._error is None else f"<Completion failed: {self._error!r}>"


async def run_child(event, cfg: Config) -> int:
    """Serialize `event`, run the configured executable on it and return its exit code.

    Raises SerializationError or SpawnFailure before the child produces anything.
    """
    try:
        argument = serialize_event(event)
    except (TypeError, ValueError) as e:
        raise SerializationError(f"Event is not JSON serializable: {e}") from e
    try:
        proc = await spawn_child(cfg.executable, argument, cfg.workdir)
    except OSError as e:
        raise SpawnFailure(f"Could not start {cfg.executable}: {e}") from e
    logger.info("Started %s (pid %s)", cfg.executable, proc.pid)
    started = time.monotonic()
    returncode = await wait_for_exit(proc, cfg.chunk_size, cfg.encoding)
    logger.info("%s exited with code %s after %.2fs", cfg.executable, returncode, time.monotonic() - started)
    return returncode


def _resolve_config(cfg: Config | None) -> Config:
    try:
        cfg = validate_config(cfg) if cfg is not None else load_config()
    except ValueError as e:
        raise ConfigError(str(e)) from e
    logger.setLevel(cfg.log_level)
    return cfg


async def relay_event(event, cfg: Config | None = None) -> Completion:
    """Relay one invocation event to the child and settle its completion exactly once."""
    completion = Completion()
    try:
        cfg = _resolve_config(cfg)
        returncode = await run_child(event, cfg)
    except RelayError as e:
        logger.error("Invocation failed: %s", e)
        completion.fail(e)
        return completion
    if returncode != 0:
        completion.fail(ProcessFailure(returncode))
    else:
        completion.succeed()
    return completion
