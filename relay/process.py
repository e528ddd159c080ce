"""Child process helpers: spawn the executable and relay its output streams."""
from __future__ import annotations
import asyncio
import logging
from typing import Callable, List
from .utils import StreamDecoder

child_logger = logging.getLogger("relay.child")

STDOUT_LABEL = "STDOUT"
STDERR_LABEL = "STDERR"


def log_chunk(label: str, text: str) -> None:
    child_logger.info("%s: %s", label, text)


async def spawn_child(executable: str, argument: str, workdir: str | None = None) -> asyncio.subprocess.Process:
    """Start `executable argument` with stdout/stderr piped and stdin closed.

    OSError (missing binary, permission denied, bad workdir) propagates to the caller.
    """
    return await asyncio.create_subprocess_exec(
        executable, argument,
        stdin=asyncio.subprocess.DEVNULL,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
        cwd=workdir,
    )


async def drain_stream(stream: asyncio.StreamReader, label: str, chunk_size: int, encoding: str = "utf-8",
                       sink: Callable[[str, str], None] = log_chunk) -> int:
    """Forward every chunk read from `stream` to `sink` until EOF; returns bytes read."""
    decoder = StreamDecoder(encoding)
    total = 0
    while True:
        data = await stream.read(chunk_size)
        if not data:
            break
        total += len(data)
        text = decoder.feed(data)
        if text:
            sink(label, text)
    tail = decoder.flush()
    if tail:
        sink(label, tail)
    return total


async def wait_for_exit(proc: asyncio.subprocess.Process, chunk_size: int, encoding: str = "utf-8",
                        sink: Callable[[str, str], None] = log_chunk) -> int:
    """Drain both pipes concurrently, then return the exit code.

    The code is only returned once both streams have reached EOF, so every
    byte the child wrote has been handed to the sink. If draining fails the
    child is killed and reaped before the error propagates.
    """
    tasks: List[asyncio.Task] = [
        asyncio.create_task(drain_stream(proc.stdout, STDOUT_LABEL, chunk_size, encoding, sink)),
        asyncio.create_task(drain_stream(proc.stderr, STDERR_LABEL, chunk_size, encoding, sink)),
    ]
    try:
        await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        if proc.returncode is None:
            try:
                proc.kill()
            except ProcessLookupError:
                pass
        await proc.wait()
        raise
    return await proc.wait()
