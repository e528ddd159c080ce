import os
import sys
import textwrap
import pytest


@pytest.fixture
def make_child(tmp_path):
    """Write an executable Python script standing in for the packaged binary."""
    def _make(body: str, name: str = "main") -> str:
        path = tmp_path / name
        header = f"#!{sys.executable}\nimport json, os, sys\n"
        path.write_text(header + textwrap.dedent(body), encoding="utf-8")
        os.chmod(path, 0o755)
        return str(path)
    return _make
