"""Tests for CLI tool."""

from __future__ import annotations

import subprocess
import sys
from pathlib import Path

import pytest

MESSAGES = '''
from typing import ClassVar, Optional

from wirepack import BaseMessage, PacketDefinition, Str, StrField, UInt8, UInt16Field

class Telemetry(BaseMessage):
    node: UInt16Field
    status: StrField

    wire_id: ClassVar[Optional[int]] = 12
    wire_max_bytes: ClassVar[Optional[int]] = 64

LOGIN = PacketDefinition(2, {"name": Str, "user": UInt8}, ["name", "user"])
'''


def _run(*args: str) -> subprocess.CompletedProcess[str]:
    return subprocess.run(
        [sys.executable, "-m", "wirepack.cli.main", *args],
        capture_output=True,
        text=True,
    )


def test_cli_help() -> None:
    """Test CLI --help flag."""
    result = _run("--help")
    assert result.returncode == 0
    assert "wirepack: Binary Wire Codec" in result.stdout
    assert "--analyze" in result.stdout


def test_cli_version() -> None:
    """Test CLI --version flag."""
    result = _run("--version")
    assert result.returncode == 0
    assert "wirepack 0.1.0" in result.stdout


def test_cli_no_arguments() -> None:
    """Test CLI prints help without arguments."""
    result = _run()
    assert result.returncode == 0
    assert "usage:" in result.stdout


def test_cli_analyze(tmp_path: Path) -> None:
    """Test CLI --analyze lists models and packet definitions."""
    messages = tmp_path / "messages.py"
    messages.write_text(MESSAGES)

    result = _run("--analyze", str(messages))

    assert result.returncode == 0, result.stderr
    assert "2 definitions loaded." in result.stdout
    assert "12: Telemetry" in result.stdout
    assert "2: LOGIN" in result.stdout
    assert "1. node (UInt16)" in result.stdout
    assert "2. status (Str)" in result.stdout
    assert "variable" in result.stdout
    assert "Allowed maximum size of message: 64 bytes" in result.stdout


def test_cli_analyze_empty_file(tmp_path: Path) -> None:
    """Test CLI --analyze on a file without definitions."""
    empty = tmp_path / "empty.py"
    empty.write_text("VALUE = 1\n")

    result = _run("--analyze", str(empty))

    assert result.returncode == 0
    assert "No messages or packet definitions found" in result.stdout


def test_cli_analyze_broken_file(tmp_path: Path) -> None:
    """Test CLI --analyze on a file that fails to import."""
    broken = tmp_path / "broken.py"
    broken.write_text("raise RuntimeError('boom')\n")

    result = _run("--analyze", str(broken))

    assert result.returncode == 1
    assert "failed: boom" in result.stderr


def test_cli_analyze_example_file() -> None:
    """Test CLI --analyze with a real example file."""
    example_file = Path("examples/basic_usage.py")
    if not example_file.exists():
        pytest.skip("Example file not found")

    result = _run("--analyze", str(example_file))
    assert result.returncode == 0
    assert "wirepack: Binary Wire Codec" in result.stdout
    assert "definitions loaded" in result.stdout
    assert "Login" in result.stdout


def test_cli_analyze_missing_file() -> None:
    """Test CLI --analyze with missing file."""
    result = _run("--analyze", "nonexistent.py")
    assert result.returncode == 1
    assert "Error: File not found: nonexistent.py" in result.stderr


def test_cli_analyze_one_packet(tmp_path: Path) -> None:
    """Test CLI --packet limits the listing to one identifier."""
    messages = tmp_path / "messages.py"
    messages.write_text(MESSAGES)

    result = _run("--analyze", str(messages), "--packet", "12")

    assert result.returncode == 0, result.stderr
    assert "1 definition loaded." in result.stdout
    assert "12: Telemetry" in result.stdout
    assert "LOGIN" not in result.stdout


def test_cli_analyze_unknown_packet(tmp_path: Path) -> None:
    """Test CLI --packet with an identifier the file does not define."""
    messages = tmp_path / "messages.py"
    messages.write_text(MESSAGES)

    result = _run("--analyze", str(messages), "--packet", "99")

    assert result.returncode == 1
    assert "No packet with identifier 99" in result.stderr


def test_cli_decode_model(tmp_path: Path) -> None:
    """Test CLI --decode with a message class packet."""
    messages = tmp_path / "messages.py"
    messages.write_text(MESSAGES)

    result = _run("--analyze", str(messages), "--decode", "0c 00 07 02 6f 6b")

    assert result.returncode == 0, result.stderr
    assert "Packet 12 (Telemetry), 6 bytes" in result.stdout
    assert "  node = 7" in result.stdout
    assert "  status = 'ok'" in result.stdout


def test_cli_decode_definition(tmp_path: Path) -> None:
    """Test CLI --decode with a PacketDefinition and trailing bytes."""
    messages = tmp_path / "messages.py"
    messages.write_text(MESSAGES)

    result = _run("--analyze", str(messages), "--decode", "02:02:61:62:05:ff")

    assert result.returncode == 0, result.stderr
    assert "Packet 2 (LOGIN), 5 bytes" in result.stdout
    assert "  name = 'ab'" in result.stdout
    assert "  user = 5" in result.stdout
    assert "1 trailing byte not decoded" in result.stdout


@pytest.mark.parametrize(
    ("hex_data", "error"),
    [
        ("63", "No definition for packet identifier 0x63"),
        ("0c 00", "Truncated data while decoding packet 12"),
        ("zz", "Invalid hex data"),
    ],
)
def test_cli_decode_errors(tmp_path: Path, hex_data: str, error: str) -> None:
    """Test CLI --decode with unknown, truncated and malformed packets."""
    messages = tmp_path / "messages.py"
    messages.write_text(MESSAGES)

    result = _run("--analyze", str(messages), "--decode", hex_data)

    assert result.returncode == 1
    assert error in result.stderr


def test_cli_decode_without_file() -> None:
    """Test CLI --decode needs a definitions file."""
    result = _run("--decode", "02")
    assert result.returncode == 2
    assert "require --analyze FILE" in result.stderr
