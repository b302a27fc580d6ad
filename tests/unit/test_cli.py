"""Tests for CLI tool."""

from __future__ import annotations

import subprocess
import sys
from pathlib import Path

import pytest

from dmapcodec import FormatSchema, Record, encode_records


def _run(*args: str) -> subprocess.CompletedProcess[str]:
    return subprocess.run(
        [sys.executable, "-m", "dmapcodec.cli.main", *args],
        capture_output=True,
        text=True,
    )


@pytest.fixture
def dmap_file(tmp_path: Path, stream_records: list[Record]) -> Path:
    path = tmp_path / "records.dmap"
    path.write_bytes(encode_records(stream_records))
    return path


def test_cli_help() -> None:
    """Test CLI --help flag."""
    result = _run("--help")
    assert result.returncode == 0
    assert "dmapcodec: DMAP Binary Codec" in result.stdout
    assert "--inspect" in result.stdout


def test_cli_version() -> None:
    """Test CLI --version flag."""
    result = _run("--version")
    assert result.returncode == 0
    assert "dmapcodec 0.1.0" in result.stdout


def test_cli_inspect(dmap_file: Path) -> None:
    """Test CLI --inspect lists every record."""
    result = _run("--inspect", str(dmap_file))
    assert result.returncode == 0
    assert "5 records" in result.stdout
    assert "scalars" in result.stdout


def test_cli_inspect_fields(dmap_file: Path) -> None:
    """Test CLI --fields shows the first record's fields."""
    result = _run("--inspect", str(dmap_file), "--fields")
    assert result.returncode == 0
    assert "stid SHORT" in result.stdout
    assert "slist SHORT[1]" in result.stdout


def test_cli_inspect_schema_failure(dmap_file: Path) -> None:
    """Test CLI --schema reports invalid records."""
    result = _run("--inspect", str(dmap_file), "--schema", "rawacf")
    assert result.returncode == 1
    assert "RAWACF: 0/5 records valid" in result.stdout


def test_cli_inspect_schema_generic(dmap_file: Path) -> None:
    """Test CLI --schema generic accepts everything."""
    result = _run("--inspect", str(dmap_file), "--schema", FormatSchema.GENERIC.value)
    assert result.returncode == 0
    assert "GENERIC: 5/5 records valid" in result.stdout


def test_cli_inspect_unknown_schema(dmap_file: Path) -> None:
    """Test CLI with a schema that does not exist."""
    result = _run("--inspect", str(dmap_file), "--schema", "bogus")
    assert result.returncode == 1
    assert "Error" in result.stderr


def test_cli_inspect_truncated(tmp_path: Path, dmap_file: Path) -> None:
    """Test CLI on a truncated file, strict and lax."""
    truncated = tmp_path / "truncated.dmap"
    truncated.write_bytes(dmap_file.read_bytes()[:-3])

    strict = _run("--inspect", str(truncated))
    assert strict.returncode == 1
    assert "Truncated record" in strict.stderr

    lax = _run("--inspect", str(truncated), "--lax")
    assert lax.returncode == 1
    assert "4 records" in lax.stdout
    assert "Stopped at corrupt data" in lax.stdout


def test_cli_inspect_missing_file() -> None:
    """Test CLI --inspect with missing file."""
    result = _run("--inspect", "nonexistent.dmap")
    assert result.returncode == 1
    assert "Error" in result.stderr or "not found" in result.stderr.lower()


def test_cli_no_args() -> None:
    """Test CLI with no arguments (should show help)."""
    result = _run()
    assert result.returncode == 0
    assert "dmapcodec: DMAP Binary Codec" in result.stdout
