"""Tests for the command-line interface."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from mail_capture import cli
from mail_capture.core.config import AppSettings, CaptureSettings, clear_settings_cache


@pytest.fixture(autouse=True)
def fresh_settings() -> None:
    clear_settings_cache()


def _write_submission(path: Path, subject: str) -> Path:
    path.write_bytes(
        b"Received: from client\r\n by sink\r\n for <x>\r\n stamp\r\n"
        + f"Subject: {subject}\r\n\r\nHello\r\n".encode("utf-8")
    )
    return path


def test_info_reports_configuration(capsys: pytest.CaptureFixture[str]) -> None:
    settings = AppSettings(capture=CaptureSettings(relay_domains=["example.com"]))
    args = cli.build_parser().parse_args(["info"])

    assert cli.execute(args, settings) == 0

    output = capsys.readouterr().out
    assert "Storage charset: utf-8" in output
    assert "Relay domains: example.com" in output


def test_replay_reports_each_outcome(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    first = _write_submission(tmp_path / "first.eml", "Welcome")
    second = _write_submission(tmp_path / "second.eml", "Digest")
    settings = AppSettings(capture=CaptureSettings(relay_domains=["accept.com"]))

    args = cli.build_parser().parse_args(
        [
            "replay",
            "--sender",
            "a@b.com",
            "--recipient",
            "c@accept.com",
            str(first),
            str(second),
        ]
    )
    assert cli.execute(args, settings) == 0

    output = capsys.readouterr().out
    assert f"{first}: ACCEPTED subject='Welcome'" in output
    assert f"{second}: ACCEPTED subject='Digest'" in output
    assert "2 accepted, 0 rejected" in output


def test_replay_rejects_unlisted_recipient(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    message = _write_submission(tmp_path / "message.eml", "Nope")
    settings = AppSettings(capture=CaptureSettings(relay_domains=["accept.com"]))

    args = cli.build_parser().parse_args(
        ["replay", "--sender", "a@b.com", "--recipient", "c@reject.com", str(message)]
    )
    cli.execute(args, settings)

    assert f"{message}: REJECTED subject='Nope'" in capsys.readouterr().out


def test_replay_skips_missing_files(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    settings = AppSettings()
    missing = tmp_path / "missing.eml"

    args = cli.build_parser().parse_args(
        ["replay", "--sender", "a@b.com", "--recipient", "c@d.com", str(missing)]
    )
    assert cli.execute(args, settings) == 0

    captured = capsys.readouterr()
    assert "cannot read" in captured.err
    assert "0 accepted, 0 rejected" in captured.out


def test_replay_with_unusable_charset_fails(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    message = _write_submission(tmp_path / "message.eml", "Hi")
    settings = AppSettings(capture=CaptureSettings(storage_charset=None))

    args = cli.build_parser().parse_args(
        ["replay", "--sender", "a@b.com", "--recipient", "c@d.com", str(message)]
    )
    assert cli.execute(args, settings) == 1
    assert "storage charset" in capsys.readouterr().err


def test_main_reads_env_file(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    for key in list(os.environ):
        if key.startswith("MAIL_CAPTURE_"):
            monkeypatch.delenv(key)
    env_file = tmp_path / "capture.env"
    env_file.write_text(
        "MAIL_CAPTURE_CAPTURE__RELAY_DOMAINS=corp.example\n", encoding="utf-8"
    )

    assert cli.main(["--env-file", str(env_file), "info"]) == 0
    assert "Relay domains: corp.example" in capsys.readouterr().out


def test_main_reports_invalid_charset_without_traceback(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    for key in list(os.environ):
        if key.startswith("MAIL_CAPTURE_"):
            monkeypatch.delenv(key)
    env_file = tmp_path / "capture.env"
    env_file.write_text(
        "MAIL_CAPTURE_CAPTURE__STORAGE_CHARSET=no-such-charset\n", encoding="utf-8"
    )

    assert cli.main(["--env-file", str(env_file), "info"]) == 1

    captured = capsys.readouterr()
    assert "Invalid configuration" in captured.err
    assert "no-such-charset" in captured.err


class RecordingSaver:
    """Minimal saver collecting what the CLI hands over."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, str, bytes]] = []

    def ingest(self, sender: str, recipient: str, raw) -> None:
        self.calls.append((sender, recipient, raw.read()))


def test_replay_hands_raw_bytes_to_any_saver(tmp_path: Path) -> None:
    message = _write_submission(tmp_path / "message.eml", "Raw")
    saver = RecordingSaver()

    assert cli._ingest_file(saver, "a@b.com", "c@d.com", message)
    assert not cli._ingest_file(saver, "a@b.com", "c@d.com", tmp_path / "nope.eml")

    assert len(saver.calls) == 1
    sender, recipient, payload = saver.calls[0]
    assert (sender, recipient) == ("a@b.com", "c@d.com")
    assert payload == message.read_bytes()
