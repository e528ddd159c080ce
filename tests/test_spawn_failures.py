import asyncio
import os

from relay.config import Config
from relay.runner import relay_event, SpawnFailure, SerializationError, RelayError, ConfigError


def _cfg(executable, workdir=None):
    return Config(executable=executable, workdir=workdir, chunk_size=1024, encoding="utf-8", log_level="INFO")


def test_missing_executable_fails_immediately(tmp_path):
    missing = str(tmp_path / "does-not-exist")
    completion = asyncio.run(relay_event({"a": 1}, _cfg(missing)))
    assert completion.settled
    assert isinstance(completion.error, SpawnFailure)
    assert isinstance(completion.error.__cause__, FileNotFoundError)
    assert missing in str(completion.error)


def test_non_executable_file_fails(tmp_path):
    path = tmp_path / "main"
    path.write_text("#!/bin/sh\nexit 0\n")
    os.chmod(path, 0o644)
    completion = asyncio.run(relay_event({}, _cfg(str(path))))
    assert isinstance(completion.error, SpawnFailure)
    assert isinstance(completion.error.__cause__, PermissionError)


def test_missing_workdir_fails(make_child, tmp_path):
    exe = make_child("sys.exit(0)\n")
    completion = asyncio.run(relay_event({}, _cfg(exe, workdir=str(tmp_path / "nowhere"))))
    assert isinstance(completion.error, SpawnFailure)


def test_unserializable_event_spawns_nothing(make_child, tmp_path):
    marker = tmp_path / "ran"
    exe = make_child(f"open({str(marker)!r}, 'w').close()\n")
    completion = asyncio.run(relay_event({"when": object()}, _cfg(exe)))
    assert isinstance(completion.error, SerializationError)
    assert isinstance(completion.error, RelayError)
    assert not marker.exists()


def test_circular_event_is_serialization_error(make_child):
    exe = make_child("sys.exit(0)\n")
    event = {}
    event["self"] = event
    completion = asyncio.run(relay_event(event, _cfg(exe)))
    assert isinstance(completion.error, SerializationError)


def test_workdir_is_used(make_child, tmp_path):
    workdir = tmp_path / "work"
    workdir.mkdir()
    exe = make_child("open('cwd-marker', 'w').close()\n")
    completion = asyncio.run(relay_event({}, _cfg(exe, workdir=str(workdir))))
    assert completion.ok
    assert (workdir / "cwd-marker").exists()


def test_lone_surrogate_event_reaches_child(make_child):
    exe = make_child("sys.exit(0 if json.loads(sys.argv[1]) == {'s': '\\ud800'} else 5)\n")
    completion = asyncio.run(relay_event({"s": "\ud800"}, _cfg(exe)))
    assert completion.settled
    assert completion.ok, completion.error


def test_unknown_encoding_spawns_nothing(make_child, tmp_path):
    marker = tmp_path / "ran"
    exe = make_child(f"open({str(marker)!r}, 'w').close()\n")
    cfg = Config(executable=exe, workdir=None, chunk_size=1024, encoding="nope", log_level="INFO")
    completion = asyncio.run(relay_event({}, cfg))
    assert isinstance(completion.error, ConfigError)
    assert not marker.exists()


def test_bad_chunk_size_env_is_config_error(make_child, monkeypatch):
    monkeypatch.setenv("RELAY_EXECUTABLE", make_child("sys.exit(0)\n"))
    monkeypatch.setenv("RELAY_CHUNK_SIZE", "64k")
    completion = asyncio.run(relay_event({}))
    assert isinstance(completion.error, ConfigError)
    assert isinstance(completion.error.__cause__, ValueError)
